# Provider-facing logic, independent of the HTTP layer:
# - credential store and consent exchange
# - folder resolution and Drive operations
# - payment orders and templated mail
