# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""AWS SDK Presigner generates AWS Signature Version 4 presigned URLs, such as
IAM authentication tokens for Amazon RDS, without sending any request."""

from __future__ import annotations

from ._http import AWSRequest, Field, Fields, URI
from ._identity import AWSCredentialIdentity
from .rds import presign_rds_iam
from .signers import (
    SigV4Presigner,
    SigV4PresignProperties,
    derive_signing_key,
    presign,
)

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "URI",
    "AWSCredentialIdentity",
    "AWSRequest",
    "Field",
    "Fields",
    "SigV4PresignProperties",
    "SigV4Presigner",
    "derive_signing_key",
    "presign",
    "presign_rds_iam",
)
