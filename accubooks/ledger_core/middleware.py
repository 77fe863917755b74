from django.utils.deprecation import MiddlewareMixin

from .models import Company
from .services.access import ACTIVE_COMPANY_SESSION_KEY


class CurrentCompanyMiddleware(MiddlewareMixin):
    # Run on every request and attach a .company attribute,
    # based on the logged-in user and their session
    def process_request(self, request):
        request.company = None
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return

        # If user switched companies,
        # choice is stored in the session as "active_company_id"
        company_id = request.session.get(ACTIVE_COMPANY_SESSION_KEY)
        if company_id:
            # ensure security: user must still be an active member of that company
            request.company = Company.objects.filter(
                id=company_id,
                memberships__user=user,
                memberships__is_active=True,
            ).first()
            if request.company is None:
                # prevent a stale or tampered session from
                # “jumping” into another company
                request.session.pop(ACTIVE_COMPANY_SESSION_KEY, None)
