import pytest

from catalog.core.errors import FormValidationError
from catalog.schemas.auth import LoginForm, SignupForm
from catalog.schemas.product import Product, ProductFormInput, ProductStatus
from catalog.services.validation import (
    ProductFormState,
    generate_slug,
    is_form_valid,
    is_valid_url,
    password_requirements,
    password_strength,
    strength_label,
    strength_severity,
    validate_confirm_password,
    validate_email,
    validate_image_urls,
    validate_login,
    validate_password,
    validate_price_consistency,
    validate_signup,
    validate_username,
)


def test_generate_slug_example():
    assert generate_slug("  Wireless Mouse!! 2.0  ") == "wireless-mouse-20"


@pytest.mark.parametrize("text", [
    "Hello World",
    "  --Already--slugged--  ",
    "Café & Crème: Deluxe_Edition",
    "multiple     spaces\tand\nnewlines",
    "!!!",
    "",
])
def test_generate_slug_is_idempotent_and_url_safe(text):
    slug = generate_slug(text)
    assert generate_slug(slug) == slug
    assert all(c in "abcdefghijklmnopqrstuvwxyz0123456789-" for c in slug)
    assert not slug.startswith("-")
    assert not slug.endswith("-")
    assert "--" not in slug


@pytest.mark.parametrize("text, expected", [
    ("Wireless\u00a0Mouse", "wireless-mouse"),
    ("Wireless\u2003\u2003Mouse", "wireless-mouse"),
    ("Desk\tLamp\nXL", "desk-lamp-xl"),
])
def test_generate_slug_hyphenates_any_whitespace(text, expected):
    assert generate_slug(text) == expected


def test_generate_slug_empty_input():
    assert generate_slug(None) == ""
    assert generate_slug("   ") == ""


def test_validate_email():
    assert validate_email("") == "Email is required"
    assert validate_email("not-an-email") == "Please enter a valid email"
    assert validate_email("jane@example") == "Please enter a valid email"
    assert validate_email("jane@example.com") is None


def test_validate_email_rejects_trailing_newline():
    assert validate_email("jane@example.com\n") == "Please enter a valid email"


def test_validate_username():
    assert validate_username("") == "Username is required"
    assert validate_username("jo") == "Username must be at least 3 characters"
    assert validate_username("joe") is None


def test_validate_password_reports_first_failing_rule():
    assert validate_password("") == "Password is required"
    assert validate_password("Ab1") == "Password must be at least 8 characters"
    assert validate_password("ABCDEFG1") == "Password must contain lowercase letters"
    assert validate_password("abcdefg1") == "Password must contain uppercase letters"
    assert validate_password("Abcdefgh") == "Password must contain numbers"
    assert validate_password("Abcdefg1") is None


def test_validate_confirm_password():
    assert validate_confirm_password("", "Secret123") == "Please confirm your password"
    assert validate_confirm_password("Secret124", "Secret123") == "Passwords do not match"
    assert validate_confirm_password("Secret123", "Secret123") is None


def test_password_strength_scores():
    assert password_strength("") == 0
    assert password_strength("abc") == 1
    assert password_strength("abcdefgh") == 2
    assert password_strength("Abcdefgh") == 3
    assert password_strength("Abcdefg1") == 4
    assert password_strength("Abcdef1!") == 5


def test_password_strength_never_decreases_when_class_added():
    base = "abcdefgh"
    for extra in ["A", "1", "!", "z"]:
        assert password_strength(base + extra) >= password_strength(base)


def test_strength_labels():
    assert [strength_label(s) for s in range(6)] == ["Weak", "Weak", "Fair", "Good", "Strong", "Very Strong"]


def test_strength_severity():
    assert [strength_severity(s) for s in range(6)] == ["error", "error", "warning", "info", "success", "success"]


def test_password_requirements_checklist():
    requirements = password_requirements("abc1")
    met = {r.label: r.met for r in requirements}
    assert met["Contains lowercase letter"] is True
    assert met["Contains number"] is True
    assert met["Contains uppercase letter"] is False
    assert met["At least 8 characters"] is False


def test_is_valid_url():
    assert is_valid_url("https://cdn.example.com/a.jpg")
    assert not is_valid_url("")
    assert not is_valid_url("cdn.example.com/a.jpg")
    assert not is_valid_url("/relative/path.jpg")


def test_validate_image_urls_requires_gallery():
    errors = validate_image_urls("https://cdn.example.com/main.jpg", ["", ""])
    assert errors == {"gallery": "At least one gallery image is required"}


def test_validate_image_urls_flags_bad_entries():
    errors = validate_image_urls("nope", ["https://cdn.example.com/1.jpg", "", "bad"])
    assert errors["mainImage"] == "Main image must be a valid URL"
    assert errors["gallery.2"] == "Gallery image 3 must be a valid URL"
    assert "gallery" not in errors


def test_validate_price_consistency():
    assert validate_price_consistency("100", "") == {}
    assert validate_price_consistency("100", "75") == {}
    assert validate_price_consistency("100", "100") == {
        "discountedPrice": "Discounted price must be less than the original price"
    }
    assert validate_price_consistency("abc", "") == {"price": "Price must be a valid number"}


def test_validate_signup_collects_every_field():
    fields = validate_signup(SignupForm(username="jo", email="bad", password="Secret123", confirmPassword="x"))
    assert fields["username"].error == "Username must be at least 3 characters"
    assert fields["email"].error == "Please enter a valid email"
    assert fields["password"].error is None
    assert fields["confirmPassword"].error == "Passwords do not match"
    assert not is_form_valid(fields)


def test_validate_login_valid_form():
    fields = validate_login(LoginForm(email="jane@example.com", password="x"))
    assert is_form_valid(fields)


def valid_form_input(**overrides) -> ProductFormInput:
    data = {
        "productName": "Wireless Mouse",
        "metaTitle": "Wireless Mouse",
        "productUrl": "wireless-mouse",
        "price": "100",
        "discountedPrice": "",
        "mainImage": "https://cdn.example.com/mouse.jpg",
        "category": "electronics",
        "status": "",
        "galleryInputs": ["https://cdn.example.com/mouse-1.jpg", ""],
    }
    data.update(overrides)
    return ProductFormInput(**data)


def test_product_form_generates_slug_on_create():
    form = ProductFormState()
    form.change("productName", "  Wireless Mouse!! 2.0  ")
    assert form.values.productUrl == "wireless-mouse-20"


def test_product_form_keeps_slug_on_edit():
    form = ProductFormState(valid_form_input(productUrl="original-slug"), is_edit=True)
    form.change("productName", "Renamed Mouse")
    assert form.values.productUrl == "original-slug"


def test_product_form_unknown_field():
    form = ProductFormState()
    with pytest.raises(KeyError):
        form.change("nope", "x")


def test_product_form_gallery_inputs():
    form = ProductFormState()
    form.add_gallery_input()
    form.set_gallery_input(1, "https://cdn.example.com/2.jpg")
    assert form.values.galleryInputs == ["", "https://cdn.example.com/2.jpg"]
    with pytest.raises(IndexError):
        form.remove_gallery_input(0)
    form.remove_gallery_input(1)
    assert form.values.galleryInputs == [""]


def test_product_form_payload_normalizes_values():
    payload = ProductFormState(valid_form_input(discountedPrice="75.50")).build_payload()
    assert payload["price"] == 100.0
    assert payload["discountedPrice"] == 75.5
    assert payload["gallery"] == [{"url": "https://cdn.example.com/mouse-1.jpg"}]
    assert payload["status"] == "draft"


def test_product_form_blank_discount_is_none():
    payload = ProductFormState(valid_form_input()).build_payload()
    assert payload["discountedPrice"] is None


def test_product_form_blocks_invalid_submission():
    form = ProductFormState(valid_form_input(discountedPrice="150", galleryInputs=[""]))
    with pytest.raises(FormValidationError) as exc:
        form.build_payload()
    assert exc.value.errors["discountedPrice"] == "Discounted price must be less than the original price"
    assert exc.value.errors["gallery"] == "At least one gallery image is required"
    assert form.discount_hint() == "Must be less than original price"


def test_product_form_from_product():
    product = Product.model_validate({
        "_id": "p9",
        "productName": "Lamp",
        "productUrl": "lamp",
        "price": 40,
        "discountedPrice": 30,
        "category": "home",
        "status": "inactive",
        "mainImage": "https://cdn.example.com/lamp.jpg",
        "gallery": ["https://cdn.example.com/lamp-1.jpg"],
    })
    form = ProductFormState.from_product(product)
    assert form.is_edit
    assert form.values.discountedPrice == "30"
    assert form.values.galleryInputs == ["https://cdn.example.com/lamp-1.jpg"]
    assert form.values.status == "inactive"


def test_product_status_outside_known_values_is_kept():
    known = Product.model_validate({"productName": "Lamp", "price": 40, "status": "active"})
    assert known.status is ProductStatus.ACTIVE

    product = Product.model_validate({"productName": "Lamp", "price": 40, "status": "archived"})
    assert product.status == "archived"
    form = ProductFormState.from_product(product)
    assert form.values.status == "archived"
    assert form.validate()["status"] == "Status must be one of draft, active, inactive"
