# This file marks the routers package for the users, products, and health routes.
# It exists so import paths stay clear when the app registers route groups.
# Each module binds one resource to its service and owns no business rules.
