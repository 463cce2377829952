# HTTP routers
