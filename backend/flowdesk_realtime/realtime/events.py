"""
Event names.

Routing never looks at these; they are the contract between the backend
processes that emit and the browser clients that listen.
"""

# Sent by this server to a socket once its subscriptions are in place
READY = "ready"

# Task lifecycle
TASK_CREATED = "task:created"
TASK_UPDATED = "task:updated"
TASK_DELETED = "task:deleted"

# Notification lifecycle
NOTIFICATION_NEW = "notification:new"
NOTIFICATION_UPDATED = "notification:updated"
NOTIFICATION_DELETED = "notification:deleted"
NOTIFICATION_BULK_UPDATED = "notification:bulkUpdated"
NOTIFICATION_CLEARED = "notification:cleared"
