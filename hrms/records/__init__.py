"""HR records — models, display mappings, CRUD service and routers."""
