# Service layer for the service control panel
# - manager_client: async HTTP client for the manager's /status, /start, /stop API
# - endpoints:      endpoint canonicalization and open/copy disposition
# - reconciler:     status snapshot -> card view models
# - dispatcher:     start/stop commands, outcome interpretation, refresh
# - notifications:  the single transient message slot
