"""managed-certs is a controller for provider managed TLS certificates.

A user declares the domains they want a certificate for with a
ManagedCertificate resource. The controller creates a matching SslCertificate
in the provisioning backend, and keeps the status of the resource in sync
with the provisioning status reported by the backend.
"""
