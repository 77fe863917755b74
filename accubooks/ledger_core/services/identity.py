import logging

from django.db import IntegrityError, transaction
from django.utils.text import slugify

from ..exceptions import ConstraintViolation, InvalidPayload, Unauthenticated
from ..forms import CompanyForm, RegisterForm
from ..models import Company, EntityMembership, User
from .posting import storage_errors

logger = logging.getLogger(__name__)


def register_user(payload) -> User:
    """Create a user; the password is stored through Django's hashers."""
    data = RegisterForm.parse(payload)

    errors = {}
    if User.objects.filter(email__iexact=data["email"]).exists():
        errors["email"] = ["A user with this email already exists"]
    if User.objects.filter(username__iexact=data["username"]).exists():
        errors["username"] = ["A user with this username already exists"]
    if errors:
        raise InvalidPayload(errors, message="User already exists")

    user = User.objects.create_user(
        username=data["username"],
        email=data["email"],
        password=data["password"],
        first_name=data["firstName"],
        last_name=data["lastName"],
        role=data["role"] or "user",
    )
    logger.info("Registered user %s", user.pk)
    return user


def find_user_for_login(email, password) -> User:
    user = User.objects.filter(email__iexact=email or "").first()
    if user is None or not user.is_active or not user.check_password(password or ""):
        raise Unauthenticated("Invalid credentials")
    return user


def list_companies(user):
    return Company.objects.filter(
        memberships__user=user, memberships__is_active=True
    ).order_by("id")


def unique_slug_for_company(name, max_tries=100):
    # Convert company name into a slug (e.g., "Test Ltd" → "test-ltd")
    base = slugify(name) or "company"
    # If plain slug is taken, append -1, -2, etc.
    candidates = [base] + [f"{base}-{i}" for i in range(1, max_tries + 1)]
    taken = set(
        Company.objects.filter(slug__in=candidates).values_list("slug", flat=True)
    )
    for slug in candidates:
        if slug not in taken:
            return slug
    raise ConstraintViolation(f"Couldn't generate unique slug for {base!r}")


def create_company(user, payload, slug_attempts=3) -> Company:
    """Create a company and make its creator an admin member, atomically."""
    data = CompanyForm.parse(payload)
    with storage_errors("company", None):
        for attempt in range(1, slug_attempts + 1):
            slug = unique_slug_for_company(data["name"])
            try:
                with transaction.atomic():
                    company = Company.objects.create(
                        name=data["name"],
                        slug=slug,
                        currency_code=(data["currencyCode"] or "USD").upper(),
                        owner=user,
                    )
                    EntityMembership.objects.create(user=user, company=company, role="admin")
                break
            except IntegrityError:
                # another request took the slug between the check and the insert
                if attempt == slug_attempts or not Company.objects.filter(slug=slug).exists():
                    raise
                logger.info("Slug %s taken concurrently, retrying", slug)
    logger.info("Company %s created by user %s", company.pk, user.pk)
    return company
