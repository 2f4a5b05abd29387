import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

import httpx

from catalog.core.errors import FormValidationError
from catalog.schemas.auth import FieldState, LoginForm, PasswordRequirement, SignupForm
from catalog.schemas.product import Product, ProductFormInput, ProductStatus

logger = logging.getLogger(__name__)


EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 8

STRENGTH_LABELS = ["Weak", "Weak", "Fair", "Good", "Strong", "Very Strong"]
STRENGTH_SEVERITY = ["error", "error", "warning", "info", "success", "success"]

LOWERCASE_RE = re.compile(r"[a-z]")
UPPERCASE_RE = re.compile(r"[A-Z]")
DIGIT_RE = re.compile(r"[0-9]")
SPECIAL_RE = re.compile(r"[^a-zA-Z0-9]")


# Field validators. Each returns None when the value is valid, else the reason.

def validate_email(value: str) -> Optional[str]:
    if not value:
        return "Email is required"
    if not EMAIL_RE.fullmatch(value):
        return "Please enter a valid email"
    return None


def validate_username(value: str) -> Optional[str]:
    if not value:
        return "Username is required"
    if len(value) < USERNAME_MIN_LENGTH:
        return f"Username must be at least {USERNAME_MIN_LENGTH} characters"
    return None


def validate_password(value: str) -> Optional[str]:
    if not value:
        return "Password is required"
    if len(value) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    if not LOWERCASE_RE.search(value):
        return "Password must contain lowercase letters"
    if not UPPERCASE_RE.search(value):
        return "Password must contain uppercase letters"
    if not DIGIT_RE.search(value):
        return "Password must contain numbers"
    return None


def validate_login_password(value: str) -> Optional[str]:
    if not value:
        return "Password is required"
    return None


def validate_confirm_password(value: str, password: str) -> Optional[str]:
    if not value:
        return "Please confirm your password"
    if value != password:
        return "Passwords do not match"
    return None


def is_valid_url(url: str) -> bool:
    if not url:
        return False
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        return False
    return bool(parsed.scheme) and bool(parsed.host)


def validate_image_urls(main_image: str, gallery_inputs: list[str]) -> dict[str, str]:
    errors = {}
    if not is_valid_url(main_image):
        errors["mainImage"] = "Main image must be a valid URL"

    filled = [(i, url) for i, url in enumerate(gallery_inputs) if url]
    if not filled:
        errors["gallery"] = "At least one gallery image is required"
    for i, url in filled:
        if not is_valid_url(url):
            errors[f"gallery.{i}"] = f"Gallery image {i + 1} must be a valid URL"
    return errors


def parse_amount(value) -> Optional[Decimal]:
    """Parse a form amount. Returns None for blank or non-numeric input."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def validate_price_consistency(price, discounted_price) -> dict[str, str]:
    errors = {}
    base = parse_amount(price)
    if base is None:
        errors["price"] = "Price must be a valid number"

    if discounted_price is None or str(discounted_price).strip() == "":
        return errors

    discounted = parse_amount(discounted_price)
    if discounted is None:
        errors["discountedPrice"] = "Discounted price must be a valid number"
    elif base is not None and discounted >= base:
        errors["discountedPrice"] = "Discounted price must be less than the original price"
    return errors


# Derived artifacts

def generate_slug(text: Optional[str]) -> str:
    if not text:
        return ""
    slug = text.lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = re.sub(r"^-+|-+$", "", slug)
    return slug


def password_strength(password: str) -> int:
    """One point each for length, lowercase, uppercase, digit and special character."""
    password = password or ""
    score = 0
    if len(password) >= PASSWORD_MIN_LENGTH:
        score += 1
    if LOWERCASE_RE.search(password):
        score += 1
    if UPPERCASE_RE.search(password):
        score += 1
    if DIGIT_RE.search(password):
        score += 1
    if SPECIAL_RE.search(password):
        score += 1
    return score


def strength_label(score: int) -> str:
    return STRENGTH_LABELS[max(0, min(score, len(STRENGTH_LABELS) - 1))]


def strength_severity(score: int) -> str:
    return STRENGTH_SEVERITY[max(0, min(score, len(STRENGTH_SEVERITY) - 1))]


def password_requirements(password: str) -> list[PasswordRequirement]:
    password = password or ""
    return [
        PasswordRequirement(label="At least 8 characters", met=len(password) >= PASSWORD_MIN_LENGTH),
        PasswordRequirement(label="Contains lowercase letter", met=bool(LOWERCASE_RE.search(password))),
        PasswordRequirement(label="Contains uppercase letter", met=bool(UPPERCASE_RE.search(password))),
        PasswordRequirement(label="Contains number", met=bool(DIGIT_RE.search(password))),
        PasswordRequirement(label="Contains special character", met=bool(SPECIAL_RE.search(password))),
    ]


# Composite forms

def is_form_valid(fields: dict[str, FieldState]) -> bool:
    return all(field.error is None for field in fields.values())


def validate_signup(form: SignupForm) -> dict[str, FieldState]:
    return {
        "username": FieldState(value=form.username, error=validate_username(form.username)),
        "email": FieldState(value=form.email, error=validate_email(form.email)),
        "password": FieldState(value=form.password, error=validate_password(form.password)),
        "confirmPassword": FieldState(
            value=form.confirmPassword,
            error=validate_confirm_password(form.confirmPassword, form.password),
        ),
    }


def validate_login(form: LoginForm) -> dict[str, FieldState]:
    return {
        "email": FieldState(value=form.email, error=validate_email(form.email)),
        "password": FieldState(value=form.password, error=validate_login_password(form.password)),
    }


def raise_for_fields(fields: dict[str, FieldState]) -> None:
    errors = {name: field.error for name, field in fields.items() if field.error}
    if errors:
        raise FormValidationError(errors)


class ProductFormState:
    """Add/edit product form values and the checks run before save."""

    REQUIRED_FIELDS = {
        "productName": "Product name is required",
        "metaTitle": "Meta title is required",
        "productUrl": "Product URL slug is required",
        "category": "Category is required",
    }

    def __init__(self, values: Optional[ProductFormInput] = None, is_edit: bool = False):
        self.values = values or ProductFormInput()
        self.is_edit = is_edit
        if not self.values.galleryInputs:
            self.values.galleryInputs = [""]

    @classmethod
    def from_product(cls, product: Product) -> "ProductFormState":
        values = ProductFormInput(
            productName=product.productName,
            metaTitle=product.metaTitle,
            productUrl=product.productUrl,
            price=str(product.price),
            discountedPrice=str(product.discountedPrice) if product.discountedPrice is not None else "",
            description=product.description,
            mainImage=product.mainImage.url if product.mainImage else "",
            category=product.category,
            status=product.status.value if isinstance(product.status, ProductStatus) else product.status,
            galleryInputs=[image.url for image in product.gallery] or [""],
        )
        return cls(values, is_edit=True)

    def change(self, field: str, value: str) -> None:
        if field == "galleryInputs" or field not in ProductFormInput.model_fields:
            raise KeyError(f"Unknown form field: {field}")
        setattr(self.values, field, value)
        # Published products keep their slug; only new products follow the name
        if field == "productName" and not self.is_edit:
            self.values.productUrl = generate_slug(value)

    def set_gallery_input(self, index: int, url: str) -> None:
        self.values.galleryInputs[index] = url

    def add_gallery_input(self) -> None:
        self.values.galleryInputs.append("")

    def remove_gallery_input(self, index: int) -> None:
        if index == 0:
            raise IndexError("The first gallery input cannot be removed")
        del self.values.galleryInputs[index]

    def discount_hint(self) -> Optional[str]:
        errors = validate_price_consistency(self.values.price, self.values.discountedPrice)
        if "discountedPrice" in errors:
            return "Must be less than original price"
        return None

    def validate(self) -> dict[str, str]:
        errors = {}
        for field, message in self.REQUIRED_FIELDS.items():
            if not getattr(self.values, field).strip():
                errors[field] = message

        if self.values.status and self.values.status not in {s.value for s in ProductStatus}:
            errors["status"] = "Status must be one of draft, active, inactive"

        errors.update(validate_price_consistency(self.values.price, self.values.discountedPrice))
        errors.update(validate_image_urls(self.values.mainImage, self.values.galleryInputs))
        return errors

    def build_payload(self) -> dict:
        errors = self.validate()
        if errors:
            logger.info(f"Product form blocked locally: {list(errors)}")
            raise FormValidationError(errors)

        discounted = parse_amount(self.values.discountedPrice)
        return {
            "productName": self.values.productName,
            "metaTitle": self.values.metaTitle,
            "productUrl": self.values.productUrl,
            "price": float(parse_amount(self.values.price)),
            "discountedPrice": float(discounted) if discounted is not None else None,
            "description": self.values.description,
            "mainImage": self.values.mainImage,
            "category": self.values.category,
            "gallery": [{"url": url} for url in self.values.galleryInputs if url],
            "status": self.values.status or ProductStatus.DRAFT.value,
        }
