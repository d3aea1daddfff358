"""Resource operations grouped by API resource.

:class:`ApplicationsResource` covers ``/applications`` and
:class:`RequestsResource` covers ``/applications/{name}/requests``. Both
borrow the owning client's :class:`~tensorlake_cloud.client.Transport`.
"""

from tensorlake_cloud.resources.applications import ApplicationsResource
from tensorlake_cloud.resources.requests import DEFAULT_PAGE_LIMIT, RequestsResource

__all__ = ["ApplicationsResource", "DEFAULT_PAGE_LIMIT", "RequestsResource"]
