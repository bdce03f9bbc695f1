"""
Search filter tables.

Each searchable entity maps its user-facing field names to a builder that
turns the raw filter value into a SQLAlchemy predicate. Builders are pure:
they construct expressions (sub-selects included) and never execute them.
Sub-selects are uncorrelated because the search queries join the same
tables in their outer FROM.
"""
from typing import Callable, Dict, Iterable, List, Mapping, Tuple, Type

from sqlalchemy import or_, select

from scenebook.models.character import Character
from scenebook.models.enums import CharacterType, CodeEnum, Cost, Gender, IntExt, Relevance, SceneType, SetLoc
from scenebook.models.montage import Montage
from scenebook.models.movie import Movie
from scenebook.models.scene import Scene
from scenebook.models.scene_character import SceneCharacterMap
from scenebook.services.exceptions import ValidationError
from scenebook.utils.search import (
    AGE_BUCKETS,
    EXTRAS_BUCKETS,
    SCENE_LENGTH_BUCKETS,
    SCREEN_TIME_BUCKETS,
    SEQUENCE_LENGTH_BUCKETS,
    icontains,
    icontains_number,
    in_range,
    overlaps,
)

Builder = Callable[[str], object]

ENTITIES = ("Movies", "Characters", "Scenes", "Montages")


def _text(*columns) -> Builder:
    def build(value: str):
        if len(columns) == 1:
            return icontains(columns[0], value)
        return or_(*[icontains(column, value) for column in columns])
    return build


def _label(column, enum_cls: Type[CodeEnum], field: str) -> Builder:
    def build(value: str):
        member = enum_cls.from_label(value.strip())
        if member is None:
            allowed = ", ".join(f"'{label}'" for label in enum_cls.labels().values())
            raise ValidationError(f"Invalid {field} filter '{value}'. Allowed values: {allowed}.")
        return column == member.value
    return build


def _lookup_bucket(buckets: Dict[str, Tuple[int, int]], field: str, value: str) -> Tuple[int, int]:
    bounds = buckets.get(value.strip())
    if bounds is None:
        allowed = ", ".join(f"'{label}'" for label in buckets)
        raise ValidationError(f"Invalid {field} filter '{value}'. Allowed values: {allowed}.")
    return bounds


def _bucket(column, buckets: Dict[str, Tuple[int, int]], field: str) -> Builder:
    def build(value: str):
        return in_range(column, _lookup_bucket(buckets, field, value))
    return build


def _movie_name(movie_column) -> Builder:
    def build(value: str):
        return movie_column.in_(
            select(Movie.id).where(icontains(Movie.name, value)).correlate(None)
        )
    return build


def _age(value: str):
    return overlaps(Character.lower_age, Character.upper_age, _lookup_bucket(AGE_BUCKETS, "Age", value))


def _scene_character(value: str):
    return Scene.id.in_(
        select(SceneCharacterMap.scene_id)
        .join(Character, Character.id == SceneCharacterMap.char_id)
        .where(icontains(Character.name, value))
        .correlate(None)
    )


def _montage_movie(value: str):
    return Montage.scene_id.in_(
        select(Scene.id)
        .join(Movie, Movie.id == Scene.movie_id)
        .where(icontains(Movie.name, value))
        .correlate(None)
    )


def _montage_scene_number(value: str):
    return Montage.scene_id.in_(
        select(Scene.id).where(icontains_number(Scene.number, value)).correlate(None)
    )


MOVIE_FILTERS: Dict[str, Builder] = {
    "Name": _text(Movie.name),
    "Logline": _text(Movie.logline),
    "Description": _text(Movie.description),
}

CHARACTER_FILTERS: Dict[str, Builder] = {
    "Movie": _movie_name(Character.movie_id),
    "Name": _text(Character.name),
    "Description": _text(Character.description),
    "Notes": _text(Character.notes),
    "Gender": _label(Character.gender, Gender, "Gender"),
    "Type": _label(Character.type, CharacterType, "Type"),
    "Age": _age,
    "Screen Time": _bucket(Character.exp_screen_time, SCREEN_TIME_BUCKETS, "Screen Time"),
}

SCENE_FILTERS: Dict[str, Builder] = {
    "Movie": _movie_name(Scene.movie_id),
    "Character": _scene_character,
    "Number": lambda value: icontains_number(Scene.number, value),
    "Act": _text(Scene.act),
    "Description": _text(Scene.description),
    "Location": _text(Scene.location),
    "Sublocation": _text(Scene.sub_location),
    "Weather": _text(Scene.weather),
    "Time": _text(Scene.time),
    "Notes": _text(*[getattr(Scene, note) for note in Scene.NOTE_FIELDS]),
    "Int Ext": _label(Scene.ie_flag, IntExt, "Int Ext"),
    "Set Loc": _label(Scene.sl_flag, SetLoc, "Set Loc"),
    "Type": _label(Scene.type, SceneType, "Type"),
    "Relevance": _label(Scene.relevance_quotient, Relevance, "Relevance"),
    "Cost": _label(Scene.cost_quotient, Cost, "Cost"),
    "Length": _bucket(Scene.exp_length, SCENE_LENGTH_BUCKETS, "Length"),
    "Extras": _bucket(Scene.num_extras, EXTRAS_BUCKETS, "Extras"),
}

MONTAGE_FILTERS: Dict[str, Builder] = {
    "Movie": _montage_movie,
    "Scene Number": _montage_scene_number,
    "Description": _text(Montage.description),
    "Location": _text(Montage.location),
    "Sublocation": _text(Montage.sub_location),
    "Weather": _text(Montage.weather),
    "Time": _text(Montage.time),
    "Notes": _text(Montage.notes),
    "Int Ext": _label(Montage.ie_flag, IntExt, "Int Ext"),
    "Set Loc": _label(Montage.sl_flag, SetLoc, "Set Loc"),
    "Length": _bucket(Montage.exp_length, SEQUENCE_LENGTH_BUCKETS, "Length"),
    "Extras": _bucket(Montage.num_extras, EXTRAS_BUCKETS, "Extras"),
}

FILTERS: Dict[str, Dict[str, Builder]] = {
    "Movies": MOVIE_FILTERS,
    "Characters": CHARACTER_FILTERS,
    "Scenes": SCENE_FILTERS,
    "Montages": MONTAGE_FILTERS,
}


def build_conditions(entity: str, filters: Iterable[Mapping[str, str]]) -> List[object]:
    """
    Translate `[{field, value}, ...]` into predicates for `entity`.

    Blank values are skipped. Unknown entities, fields, labels and buckets
    raise ValidationError.
    """
    table = FILTERS.get(entity)
    if table is None:
        raise ValidationError(f"Invalid entity type '{entity}'. Allowed values: {', '.join(ENTITIES)}.")

    conditions = []
    for item in filters or []:
        field = item.get("field")
        value = item.get("value")
        if value is None or str(value).strip() == "":
            continue
        builder = table.get(field)
        if builder is None:
            raise ValidationError(f"Unsupported field: {field}")
        conditions.append(builder(str(value)))
    return conditions
