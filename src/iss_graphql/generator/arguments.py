"""Argument synthesizer — path parameters and block arguments to GraphQL arguments."""

import structlog
from graphql import GraphQLArgument, GraphQLEnumType, GraphQLNonNull, GraphQLString

from iss_graphql.generator.registry import SharedTypes, generate_enum
from iss_graphql.generator.scalars import to_scalar
from iss_graphql.generator.specs import GenerationSpec
from iss_graphql.parser.base import ArgumentDescriptor

logger = structlog.get_logger()


def generate_arguments(
    required_args: list[str],
    block_args: list[ArgumentDescriptor],
    spec: GenerationSpec,
    shared: SharedTypes,
    enums: dict[str, GraphQLEnumType],
) -> dict[str, GraphQLArgument]:
    """Build the arguments of one query field.

    Path parameters come first and are required unless the spec gives them
    a default. ``enums`` caches enum overrides so that every block of a
    reference shares one enum type per argument name.
    """
    args: dict[str, GraphQLArgument] = {}
    for name in required_args:
        if name in spec.default_args:
            args[name] = GraphQLArgument(GraphQLString, default_value=spec.default_args[name])
        else:
            args[name] = GraphQLArgument(GraphQLNonNull(GraphQLString))

    for arg in block_args:
        if arg.name in args:
            logger.debug("argument_shadowed", reference=spec.reference_id, argument=arg.name)
            continue
        args[arg.name] = GraphQLArgument(
            _argument_type(arg, spec, shared, enums),
            description=arg.description or None,
        )

    return args


def _argument_type(
    arg: ArgumentDescriptor,
    spec: GenerationSpec,
    shared: SharedTypes,
    enums: dict[str, GraphQLEnumType],
):
    if arg.name in spec.enum_arg_overrides:
        if arg.name not in enums:
            enums[arg.name] = generate_enum(arg.name, spec.enum_arg_overrides[arg.name])
        return enums[arg.name]

    shared_type = shared.input_type(arg.name)
    if shared_type is not None:
        return shared_type

    label = spec.arg_type_overrides.get(arg.name, arg.declared_type)
    return to_scalar(label, f"argument {arg.name!r} of reference {spec.reference_id}")
