# Middleware package
