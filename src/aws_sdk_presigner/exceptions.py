# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class AWSSDKWarning(UserWarning): ...


class BaseAWSSDKException(Exception):
    """Top-level exception to capture SDK-related errors."""


class MissingExpectedParameterException(BaseAWSSDKException, ValueError):
    """Presigning requires specific signing properties to be present."""


class InvalidEndpointException(BaseAWSSDKException, ValueError):
    """The supplied host and port could not be turned into a request URL."""
