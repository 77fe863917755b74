from ..models import AuditLog


def log_action(*, action: str, instance, user=None, company_id=None, changes: dict | None = None):
    """
    Central audit logger.
    Call inside the same transaction as the write being audited.
    """
    if company_id is None:
        company_id = getattr(instance, "company_id", None)

    return AuditLog.objects.create(
        company_id=company_id,
        user=user,
        action=action,
        object_type=instance.__class__.__name__,
        object_id=str(instance.pk),
        changes=changes,
    )
