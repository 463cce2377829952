# Core infrastructure: config, logging, errors, database
