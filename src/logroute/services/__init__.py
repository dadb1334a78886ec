"""下游路由服务"""

from logroute.services.routing import get_partition_path, group_messages_by_partition

__all__ = ["get_partition_path", "group_messages_by_partition"]
