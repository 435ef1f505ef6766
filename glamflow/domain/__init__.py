"""Domain packages: one router, service and schemas per business area"""
