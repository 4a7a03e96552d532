# This file marks the schemas package for API request and response models.
# It exists so user, product, and error contracts can be imported as one namespace.
# Request models reject unknown fields; response models serialize with camelCase aliases.
