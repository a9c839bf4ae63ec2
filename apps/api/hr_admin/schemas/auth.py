"""Request context passed explicitly into every tenant-scoped operation."""

from pydantic import BaseModel

from hr_admin.db.enums import Role


class RequestContext(BaseModel):
    """
    Caller identity and tenant context for one request.

    Built once per request by tenancy_service.build_request_context and
    threaded through every service call. company_id is None when the
    caller has no active company; user_id is None when unauthenticated.
    """
    user_id: int | None = None
    company_id: int | None = None
    role: Role | None = None

    model_config = {"frozen": True}

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None
