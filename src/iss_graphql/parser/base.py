"""Unified data models for parsed ISS reference documents.

The reference parser converts one reference page into these models;
the generator consumes nothing else from the page.
"""

from pydantic import BaseModel


class ArgumentDescriptor(BaseModel):
    """A block-local argument documented on a reference page."""

    name: str
    description: str = ""
    declared_type: str  # advisory, often imprecise: string / int32 / date ...


class DataBlock(BaseModel):
    """A named, independently fetchable table of a reference."""

    name: str  # opaque selector, may contain dots: marketdata.yields
    description: str = ""
    args: list[ArgumentDescriptor] = []


class ReferenceDescriptor(BaseModel):
    """A single ISS reference: path template, path params and blocks."""

    path: str  # engines/[engine]/markets
    required_args: list[str]
    blocks: list[DataBlock]
