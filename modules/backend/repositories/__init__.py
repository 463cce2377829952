# Data access layer: soft-delete aware repositories
