#!/usr/bin/env python3
"""
Constants for the kintone app-schema client.

This module contains shared constants used across the client, including
endpoint names for each schema facet and the platform error codes the
client recognizes.
"""

# Path segments of the REST API
# Format: /k[/guest/{space}]/v1[/preview]/{endpoint}.json
API_ROOT = "/k"
API_VERSION = "v1"
PREVIEW_SEGMENT = "preview"

# Endpoint names per facet (without the .json suffix)
ENDPOINTS = {
    # Form
    "form_fields": "app/form/fields",
    "form_layout": "app/form/layout",

    # Views and process management
    "views": "app/views",
    "process_management": "app/status",

    # App lifecycle
    "app": "app",
    "apps": "apps",
    "deploy": "app/deploy",

    # Access control
    "field_acl": "field/acl",
    "record_acl": "record/acl",
    "evaluate_records_acl": "records/acl/evaluate",

    # Spaces (used for the default thread lookup when creating apps)
    "space": "space",
}

# Error code returned when a supplied revision is not the latest one
REVISION_CONFLICT_CODE = "GAIA_CO02"
REVISION_CONFLICT_STATUS = 409

# GET requests whose URL exceeds this length are tunnelled through POST
MAX_GET_URL_LENGTH = 4096

# Maximum page size of the apps endpoint
APPS_LIMIT = 100
