"""Reactor scaffolder -- synthesizes the component package configuration.

Quick usage::

    from reactor.models import ComponentMetadata
    from reactor.scaffolder import ConfigSynthesizer

    metadata = ComponentMetadata(name="awesomeComponent", description="...")
    config_set = ConfigSynthesizer().synthesize(metadata)
    print(config_set.webpack_config_text)
"""

from reactor.scaffolder.generator import (
    CodeLiteral,
    ConfigSynthesizer,
    synthesize,
    unquote_code_literals,
)
from reactor.scaffolder.templates import TemplateRenderer

__all__ = [
    "CodeLiteral",
    "ConfigSynthesizer",
    "TemplateRenderer",
    "synthesize",
    "unquote_code_literals",
]
