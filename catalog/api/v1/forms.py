from typing import Optional

from fastapi import APIRouter, HTTPException, status

from catalog.schemas.auth import (
    FormStateResponse,
    LoginForm,
    PasswordStrengthRequest,
    PasswordStrengthResponse,
    SignupForm,
    SlugRequest,
)
from catalog.schemas.product import ProductFormInput
from catalog.services.validation import (
    ProductFormState,
    generate_slug,
    is_form_valid,
    password_requirements,
    password_strength,
    strength_label,
    strength_severity,
    validate_login,
    validate_signup,
)

router = APIRouter(prefix="/api/v1/forms", tags=["forms"])


@router.post("/signup/validate", response_model=FormStateResponse)
async def validate_signup_form(form: SignupForm):
    fields = validate_signup(form)
    return FormStateResponse(fields=fields, valid=is_form_valid(fields))


@router.post("/login/validate", response_model=FormStateResponse)
async def validate_login_form(form: LoginForm):
    fields = validate_login(form)
    return FormStateResponse(fields=fields, valid=is_form_valid(fields))


@router.post("/product/validate")
async def validate_product_form(values: ProductFormInput, is_edit: bool = False, changed: Optional[str] = None):
    form = ProductFormState(values, is_edit=is_edit)
    if changed:
        try:
            form.change(changed, getattr(values, changed))
        except (KeyError, AttributeError):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown form field: {changed}")
    errors = form.validate()
    return {
        "values": form.values,
        "errors": errors,
        "discountHint": form.discount_hint(),
        "valid": not errors,
    }


@router.post("/slug")
async def slug(data: SlugRequest):
    return {"slug": generate_slug(data.text)}


@router.post("/password-strength", response_model=PasswordStrengthResponse)
async def strength(data: PasswordStrengthRequest):
    score = password_strength(data.password)
    return PasswordStrengthResponse(
        score=score,
        label=strength_label(score),
        severity=strength_severity(score),
        requirements=password_requirements(data.password),
    )
