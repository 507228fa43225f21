"""Dashboard views — vendor listing, add, update, delete."""

from __future__ import annotations

import pathlib

import structlog
from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from src.admin.auth import AdminState
from src.admin.dependencies import get_admin_state, get_vendor_store
from src.config import Settings, get_settings
from src.core.exceptions import AppException, NotFoundError
from src.repositories.vendor import VendorStore
from src.schemas.search import SearchPage
from src.schemas.vendor import FIELD_LABELS, VendorForm, VendorRecord
from src.search.controller import FETCH_ERROR_MESSAGE
from src.search.service import admin_listing
from src.vendors.mutations import UPDATE_ERROR, VendorMutationController

logger = structlog.get_logger()

router = APIRouter(prefix="/dashboard", tags=["admin-dashboard"])

TEMPLATES_DIR = pathlib.Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def vendor_form(
    chemical_name: str = Form(""),
    category: str = Form(""),
    cas_no: str = Form(""),
    supplier_name: str = Form(""),
    contact_info: str = Form(""),
    phone_number: str = Form(""),
    business_status: str = Form(""),
    country: str = Form(""),
) -> VendorForm:
    """Read the flat vendor form; blanks are reported by validation, not 422."""
    return VendorForm(
        chemical_name=chemical_name,
        category=category,
        cas_no=cas_no,
        supplier_name=supplier_name,
        contact_info=contact_info,
        phone_number=phone_number,
        business_status=business_status,
        country=country,
    )


@router.get("", response_class=HTMLResponse)
async def dashboard_page(
    request: Request,
    q: str = Query(""),
    page: int = Query(1, ge=1),
    admin: AdminState = Depends(get_admin_state),
    store: VendorStore = Depends(get_vendor_store),
    settings: Settings = Depends(get_settings),
):
    """Vendor directory listing; an empty query lists every vendor."""
    if admin is not AdminState.AUTHENTICATED:
        return RedirectResponse(url="/login", status_code=303)

    error = None
    try:
        result = await admin_listing(store, settings.page_size).fetch(q, page)
    except AppException as e:
        logger.warning("dashboard_listing_failed", query=q, page=page, error=e.message)
        result = SearchPage(query=q.strip())
        error = FETCH_ERROR_MESSAGE

    context = {
        "result": result,
        "error": error,
        "field_labels": FIELD_LABELS,
    }

    # HTMX search box / pager refresh only the table
    if request.headers.get("HX-Request"):
        return templates.TemplateResponse(request, "partials/vendor_table.html", context)

    mutations = VendorMutationController(store)
    context["next_sr_no"] = await mutations.load_next_sequence()
    context["form"] = mutations.form
    context["message"] = ""
    return templates.TemplateResponse(request, "dashboard.html", context)


@router.post("/vendors", response_class=HTMLResponse)
async def add_vendor(
    request: Request,
    form: VendorForm = Depends(vendor_form),
    admin: AdminState = Depends(get_admin_state),
    store: VendorStore = Depends(get_vendor_store),
):
    """Insert a vendor under the next free sequence number (HTMX partial)."""
    if admin is not AdminState.AUTHENTICATED:
        return HTMLResponse("Unauthorized", status_code=401)

    mutations = VendorMutationController(store)
    ok = await mutations.insert(form)
    if mutations.next_sr_no is None:
        await mutations.load_next_sequence()

    return templates.TemplateResponse(
        request,
        "partials/vendor_form.html",
        {
            "form": mutations.form,
            "next_sr_no": mutations.next_sr_no,
            "message": mutations.message,
            "ok": ok,
            "field_labels": FIELD_LABELS,
        },
    )


def _banner(message: str) -> HTMLResponse:
    """Error alert retargeted to the page banner, leaving the row untouched."""
    return HTMLResponse(
        f'<div class="alert alert-error">{message}</div>',
        headers={"HX-Retarget": "#dashboard-message"},
    )


def _edit_row(request: Request, vendor: VendorRecord, settings: Settings, message: str = "", ok: bool = False):
    return templates.TemplateResponse(
        request,
        "partials/vendor_edit_row.html",
        {
            "vendor": vendor,
            "message": message,
            "ok": ok,
            "field_labels": FIELD_LABELS,
            "dismiss_ms": int(settings.update_dismiss_seconds * 1000),
        },
    )


@router.get("/vendors/{sr_no}", response_class=HTMLResponse)
async def vendor_row(
    request: Request,
    sr_no: str,
    admin: AdminState = Depends(get_admin_state),
    store: VendorStore = Depends(get_vendor_store),
):
    """The stored row, read-only. Closes the edit view."""
    if admin is not AdminState.AUTHENTICATED:
        return HTMLResponse("Unauthorized", status_code=401)

    try:
        vendor = await store.get(sr_no)
    except NotFoundError:
        # Deleted elsewhere: swap the row out
        return HTMLResponse("")
    except AppException as e:
        logger.warning("vendor_row_failed", sr_no=sr_no, error=e.message)
        return _banner(FETCH_ERROR_MESSAGE)

    return templates.TemplateResponse(request, "partials/vendor_row.html", {"vendor": vendor})


@router.get("/vendors/{sr_no}/edit", response_class=HTMLResponse)
async def edit_vendor(
    request: Request,
    sr_no: str,
    admin: AdminState = Depends(get_admin_state),
    store: VendorStore = Depends(get_vendor_store),
    settings: Settings = Depends(get_settings),
):
    """Open the edit view on a snapshot of the stored row."""
    if admin is not AdminState.AUTHENTICATED:
        return HTMLResponse("Unauthorized", status_code=401)

    try:
        vendor = await store.get(sr_no)
    except AppException as e:
        logger.warning("vendor_edit_failed", sr_no=sr_no, error=e.message)
        return _banner(UPDATE_ERROR)

    return _edit_row(request, vendor, settings)


@router.post("/vendors/{sr_no}", response_class=HTMLResponse)
async def update_vendor(
    request: Request,
    sr_no: str,
    form: VendorForm = Depends(vendor_form),
    admin: AdminState = Depends(get_admin_state),
    store: VendorStore = Depends(get_vendor_store),
    settings: Settings = Depends(get_settings),
):
    """Write an edited vendor back.

    Success shows the stored row in the edit view until the dismiss delay
    swaps in the read-only row. Failure keeps the edit view open with the
    entered values and the error.
    """
    if admin is not AdminState.AUTHENTICATED:
        return HTMLResponse("Unauthorized", status_code=401)

    record = VendorRecord(sr_no=sr_no, **form.model_dump())
    mutations = VendorMutationController(store, dismiss_seconds=settings.update_dismiss_seconds)
    mutations.listing.results = [record]
    ok = await mutations.submit_update(record)
    await mutations.close()

    vendor = mutations.listing.results[0] if ok else record
    return _edit_row(request, vendor, settings, mutations.update_message, ok)


@router.post("/vendors/{sr_no}/delete", response_class=HTMLResponse)
async def delete_vendor(
    sr_no: str,
    confirm: str = Form(""),
    admin: AdminState = Depends(get_admin_state),
    store: VendorStore = Depends(get_vendor_store),
):
    """Delete a vendor. Requires ``confirm=yes`` from the confirmation prompt."""
    if admin is not AdminState.AUTHENTICATED:
        return HTMLResponse("Unauthorized", status_code=401)

    mutations = VendorMutationController(store)
    prompt = mutations.request_delete(sr_no)
    if confirm != "yes":
        mutations.cancel_delete()
        return HTMLResponse(prompt, status_code=400)

    if not await mutations.confirm_delete():
        # Keep the stale row; show the error in the page banner instead
        return _banner(mutations.message)
    # Empty body: HTMX swaps the row out
    return HTMLResponse("")
