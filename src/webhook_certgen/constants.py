"""
Constants used throughout the certificate job.

This module defines constant values that are part of the job's contract
with the cluster and are not meant to be overridden at runtime:
- Secret data keys and type
- Resource labels
- Certificate generation defaults
- Error message templates
"""

# Secret data keys (kubernetes.io/tls convention)
CERT_KEY = "tls.crt"
PRIVATE_KEY_KEY = "tls.key"
REQUIRED_SECRET_KEYS = (CERT_KEY, PRIVATE_KEY_KEY)
TLS_SECRET_TYPE = "kubernetes.io/tls"

# Label constants for resource identification
MANAGED_BY_LABEL_KEY = "app.kubernetes.io/managed-by"
MANAGED_BY_LABEL_VALUE = "webhook-certgen"
COMPONENT_LABEL_KEY = "app.kubernetes.io/component"
COMPONENT_WEBHOOK_CERT = "webhook-certificate"

# Default target identifiers
DEFAULT_SECRET_NAME = "api-gateway-webhook-service"
DEFAULT_SECRET_NAMESPACE = "cert-gen"
DEFAULT_SERVICE_NAME = "api-gateway-webhook-service"
DEFAULT_CRD_NAME = "apirules.gateway.kyma-project.io"

# Certificate defaults
DEFAULT_ROTATION_LEAD_DAYS = 10
DEFAULT_CERT_VALIDITY_DAYS = 365
DEFAULT_KEY_SIZE = 2048
MINIMUM_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537
CLOCK_SKEW_BACKDATE_SECONDS = 3600
CLUSTER_DOMAIN = "cluster.local"

# API aggregation layer
APIEXTENSIONS_GROUP_VERSION = "apiextensions.k8s.io/v1"
CRD_RESOURCE_PLURAL = "customresourcedefinitions"

# Outcome string returned by the process entry point on full success
SUCCESS_OUTCOME = "success"

# Error message templates
ERROR_MISSING_CONVERSION = "conversion not found in CRD '{}'"
ERROR_MISSING_WEBHOOK = "conversion webhook not found in CRD '{}'"
ERROR_MISSING_CLIENT_CONFIG = "client config for conversion webhook not found in CRD '{}'"
