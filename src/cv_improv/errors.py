# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Error taxonomy for the analysis pipeline.

Each error carries a machine-readable `code` and the HTTP status the API
boundary maps it to. Response parsing problems are NOT errors: they are
recorded on the returned result via its `error` field.
"""


class CVImprovError(Exception):
    """Base class for all errors raised by cv_improv."""
    code = "INTERNAL_ERROR"
    http_status = 500


class ValidationError(CVImprovError, ValueError):
    """Empty or malformed caller input."""
    code = "VALIDATION_ERROR"
    http_status = 400


class ConfigurationError(CVImprovError):
    """No model provider credential is configured."""
    code = "AI_SERVICE_ERROR"
    http_status = 503


class RateLimitError(CVImprovError):
    """The local daily request quota is exhausted. Resets on the next day."""
    code = "RATE_LIMIT_EXCEEDED"
    http_status = 429


class UpstreamError(CVImprovError):
    """Generic failure calling the model provider. Safe to retry with backoff."""
    code = "AI_SERVICE_ERROR"
    http_status = 503


class UpstreamAuthError(UpstreamError):
    """The provider rejected the configured credential."""


class UpstreamRateLimitError(UpstreamError):
    """The provider itself throttled the request."""
