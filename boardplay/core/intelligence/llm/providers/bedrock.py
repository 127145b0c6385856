# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""AWS Bedrock provider."""

import re
from typing import Any

from boardplay.core.config.llm_providers import AIProvider, ProviderConfig
from boardplay.core.intelligence.llm.providers.base import BaseProvider

ACCESS_KEY_PATTERN = re.compile(r"^AKIA[0-9A-Z]{16}$")

_REGION_FAMILIES = ("us", "eu", "ap", "ca", "sa")


def cross_region_model_id(model: str, region: str) -> str:
    """Prefix a Bedrock model id with its cross-region inference profile.

    Args:
        model: Bedrock model id (e.g. 'anthropic.claude-3-haiku-20240307-v1:0').
        region: AWS region (e.g. 'eu-west-1').

    Returns:
        Model id with the region family prefix ('eu.anthropic.claude...'),
        unchanged when a prefix is already present.
    """
    family = region.split("-")[0]
    known = set(_REGION_FAMILIES) | {family}
    if model.split(".")[0] in known:
        return model
    return f"{family}.{model}"


class BedrockProvider(BaseProvider):
    """Bedrock foundation models authenticated with an access-key pair."""

    provider = AIProvider.BEDROCK
    name = "AWS Bedrock"
    required_fields = (
        ("region", "AWS region"),
        ("access_key_id", "Access Key ID"),
        ("secret_access_key", "Secret Access Key"),
        ("model", "Model name"),
    )

    def model_id(self, config: ProviderConfig) -> str:
        """Get the model id as Bedrock will be asked for it."""
        if config.cross_region and config.region and config.model:
            return cross_region_model_id(config.model, config.region)
        return config.model

    def litellm_model(self, config: ProviderConfig) -> str:
        return f"bedrock/{self.model_id(config)}"

    def litellm_params(self, config: ProviderConfig) -> dict[str, Any]:
        return {
            "aws_access_key_id": config.secret("access_key_id"),
            "aws_secret_access_key": config.secret("secret_access_key"),
            "aws_region_name": config.region,
        }

    def _check_config(
        self, config: ProviderConfig, errors: list[str], warnings: list[str]
    ) -> None:
        key_id = config.secret("access_key_id")
        if key_id and not ACCESS_KEY_PATTERN.match(key_id):
            errors.append(
                'AWS Access Key ID should start with "AKIA" followed by 16 '
                "alphanumeric characters"
            )

        formatted = self.model_id(config)
        if formatted != config.model:
            warnings.append(f'Cross-region enabled: Model will be accessed as "{formatted}"')
