from typing import TYPE_CHECKING, Annotated, Any, TypeVar, Union, get_args, get_origin

T = TypeVar("T")
_ANNOTATED_MARKER_MIN_ARGS = 2


class SeedMarker:
    """Marker that indicates a provider parameter receives the seed data passed to ``make``."""


if TYPE_CHECKING:
    Seed = Union[T, T]  # noqa: UP007,PYI016
    """Mark a provider parameter that receives the raw seed data.

    At runtime ``Seed[T]`` becomes ``Annotated[T, SeedMarker()]``. When a
    DTO field is resolved, the seed is the raw value supplied for the field.

    Examples:
        .. code-block:: python

            def build_notes(data: Seed[Mapping[str, Any]]) -> NotesContract:
                return Notes(data)


            container.add_factory(build_notes)
    """

else:

    class Seed:
        """Mark a provider parameter that receives the raw seed data.

        At runtime ``Seed[T]`` resolves to ``Annotated[T, SeedMarker()]``.
        A missing seed (``make(X)`` without data) is passed as ``None``.

        Examples:
            .. code-block:: python

                def build_notes(data: Seed[Mapping[str, Any]]) -> NotesContract:
                    return Notes(data)


                container.add_factory(build_notes)

        """

        def __class_getitem__(cls, item: T) -> Annotated[T, SeedMarker]:
            if get_origin(item) is Annotated:
                args = get_args(item)
                inner = args[0]
                metadata = args[1:]
                return _build_annotated((inner, *metadata, SeedMarker()))
            return _build_annotated((item, SeedMarker()))


def is_seed_annotation(annotation: Any) -> bool:
    """Return True when annotation is Annotated[..., SeedMarker()]."""
    if get_origin(annotation) is not Annotated:
        return False
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return False
    metadata = annotation_args[1:]
    return any(isinstance(item, SeedMarker) for item in metadata)


def _build_annotated(params: tuple[object, ...]) -> Any:
    """Return Annotated[...] with a pre-built params tuple (Py 3.10+ compatible)."""
    try:
        return Annotated.__class_getitem__(params)  # type: ignore[attr-defined]
    except AttributeError:
        return Annotated.__getitem__(params)  # type: ignore[attr-defined]


__all__ = ["Seed", "SeedMarker", "is_seed_annotation"]
