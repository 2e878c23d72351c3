"""Infrastructure modules for the notification service.

Centralized infrastructure components:
- configuration: Settings management (Settings and per-concern sub-settings)
- logging: Structured logging (get_module_logger, bind_request_context)
- notifications: Multi-channel notification dispatch engine
- operations: Operation results and error classification
- persistence: SQLAlchemy engine, sessions and table mappings
- resilience: Circuit breakers for external channels
- services: Dependency injection services (SettingsDep, NotificationServiceDep, get_settings)
"""
