"""
Capability registry for RAGmonsters MCP.

The catalog is a closed set of three capability kinds:

- Action: a callable operation with a typed argument model.
- Knowledge: a document addressed by a ragmonsters:// URI (optionally templated).
- Guidance: a fixed template describing how to combine Actions.

The registry is the single entry point for discovery and invocation. Every
invocation validates its input before touching the database and is audited.
"""

import json
import logging
import re
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Literal, assert_never

import anyio
from pydantic import ValidationError as PydanticValidationError

from ..core.audit import AuditLogger
from ..core.errors import CapabilityError, NotFoundError, ValidationError
from ..core.reference_cache import ReferenceCache
from ..models import (
    ArgumentModel,
    CompareMonstersArgs,
    GetMonsterByHabitatArgs,
    GetMonsterByIdArgs,
    GetMonsterByNameArgs,
    GetMonstersArgs,
    GetSubcategoriesArgs,
    NoArgs,
)
from .actions import MonsterActions
from .guidance import get_guidance_description, get_guidance_template, list_guidance_names
from .knowledge import MonsterKnowledge

logger = logging.getLogger(__name__)

CapabilityKind = Literal["action", "knowledge", "guidance"]

_TEMPLATE_PARAM = re.compile(r"\{(\w+)\}")


# =============================================================================
# Capability variants
# =============================================================================


@dataclass(frozen=True)
class Action:
    """An operation the agent can invoke."""

    name: str
    description: str
    arguments: type[ArgumentModel]
    handler: Callable[[Any], dict[str, Any]]


@dataclass(frozen=True)
class Knowledge:
    """A read-only document addressed by URI."""

    uri: str
    name: str
    description: str
    loader: Callable[..., str | bytes]
    mime_type: str = "text/markdown"
    _pattern: re.Pattern[str] | None = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self) -> None:
        if _TEMPLATE_PARAM.search(self.uri):
            pattern = ""
            position = 0
            for match in _TEMPLATE_PARAM.finditer(self.uri):
                pattern += re.escape(self.uri[position:match.start()])
                pattern += f"(?P<{match.group(1)}>[^/]+)"
                position = match.end()
            pattern += re.escape(self.uri[position:])
            object.__setattr__(self, "_pattern", re.compile(f"^{pattern}$"))

    @property
    def is_template(self) -> bool:
        return self._pattern is not None

    def match(self, uri: str) -> dict[str, str] | None:
        """Return URI parameters if this Knowledge serves the URI, else None."""
        if self._pattern is None:
            return {} if uri == self.uri else None
        found = self._pattern.match(uri)
        return found.groupdict() if found else None


@dataclass(frozen=True)
class Guidance:
    """A fixed workflow template."""

    name: str
    description: str
    template: str


Capability = Action | Knowledge | Guidance


def kind_of(capability: Capability) -> CapabilityKind:
    match capability:
        case Action():
            return "action"
        case Knowledge():
            return "knowledge"
        case Guidance():
            return "guidance"
        case _:
            assert_never(capability)


def describe(capability: Capability) -> dict[str, Any]:
    """Build the discovery descriptor for one capability.

    Action descriptors include the JSON schema of their argument model.
    """
    match capability:
        case Action(name=name, description=description, arguments=arguments):
            return {
                "kind": "action",
                "name": name,
                "description": description,
                "inputSchema": arguments.model_json_schema(by_alias=True),
            }
        case Knowledge():
            return {
                "kind": "knowledge",
                "uri": capability.uri,
                "name": capability.name,
                "description": capability.description,
                "mimeType": capability.mime_type,
                "templated": capability.is_template,
            }
        case Guidance(name=name, description=description):
            return {
                "kind": "guidance",
                "name": name,
                "description": description,
            }
        case _:
            assert_never(capability)


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class ActionResult:
    """Payload returned by a successful Action."""

    action: str
    payload: dict[str, Any]

    @property
    def summary(self) -> str | None:
        return self.payload.get("summary")

    def to_json(self) -> str:
        return json.dumps(self.payload, default=str)

    def to_content(self) -> dict[str, Any]:
        """Wrap the payload in the text-content envelope."""
        return {"content": [{"type": "text", "data": self.to_json()}]}


@dataclass(frozen=True)
class KnowledgeContent:
    uri: str
    mime_type: str
    body: str | bytes


def to_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Convert a pydantic failure into the capability ValidationError.

    Errors raised by the guardrails inside a validator are passed through
    unchanged; anything else is described from its location and message.
    """
    errors = exc.errors()
    if not errors:
        return ValidationError(str(exc))

    first = errors[0]
    inner = (first.get("ctx") or {}).get("error")
    if isinstance(inner, ValidationError):
        return inner

    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return ValidationError(f"Invalid argument '{location}': {first['msg']}", field=location)
    return ValidationError(f"Invalid arguments: {first['msg']}")


# =============================================================================
# Registry
# =============================================================================


class CapabilityRegistry:
    """Discovery and invocation over a fixed capability catalog."""

    def __init__(self, capabilities: list[Capability], audit: AuditLogger | None = None):
        """Initialize the registry.

        Args:
            capabilities: The catalog. Names (and URIs) must be unique per kind.
            audit: Optional audit logger recording every invocation.

        Raises:
            ValueError: If two capabilities of the same kind share a name.
        """
        self._actions: dict[str, Action] = {}
        self._knowledge: dict[str, Knowledge] = {}
        self._guidance: dict[str, Guidance] = {}
        self._audit = audit

        for capability in capabilities:
            match capability:
                case Action(name=key):
                    table: dict[str, Any] = self._actions
                case Knowledge(uri=key):
                    table = self._knowledge
                case Guidance(name=key):
                    table = self._guidance
                case _:
                    assert_never(capability)
            if key in table:
                raise ValueError(f"Duplicate {kind_of(capability)} '{key}'")
            table[key] = capability

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def list_actions(self) -> list[Action]:
        return list(self._actions.values())

    def list_knowledge(self) -> list[Knowledge]:
        return list(self._knowledge.values())

    def list_guidance(self) -> list[Guidance]:
        return list(self._guidance.values())

    def discover(self) -> dict[str, list[dict[str, Any]]]:
        """Descriptors for the whole catalog, grouped by kind."""
        return {
            "actions": [describe(c) for c in self.list_actions()],
            "knowledge": [describe(c) for c in self.list_knowledge()],
            "guidance": [describe(c) for c in self.list_guidance()],
        }

    def get_action(self, name: str) -> Action:
        action = self._actions.get(name)
        if action is None:
            raise NotFoundError(f"Unknown action '{name}'")
        return action

    # -------------------------------------------------------------------------
    # Invocation
    # -------------------------------------------------------------------------

    def _record(
        self,
        kind: CapabilityKind,
        name: str,
        params: dict[str, Any],
        started: float,
        result_summary: str | None = None,
        error: Exception | None = None,
    ) -> None:
        if self._audit is None:
            return
        duration_ms = (time.perf_counter() - started) * 1000
        if error is None:
            self._audit.log_operation(
                kind=kind,
                name=name,
                params=params,
                result_summary=result_summary,
                success=True,
                duration_ms=duration_ms,
            )
        else:
            error_kind = error.kind if isinstance(error, CapabilityError) else "internal_error"
            self._audit.log_operation(
                kind=kind,
                name=name,
                params=params,
                success=False,
                error_kind=error_kind,
                error=str(error),
                duration_ms=duration_ms,
            )

    @contextmanager
    def _audited(
        self, kind: CapabilityKind, name: str, params: dict[str, Any]
    ) -> Iterator[dict[str, Any]]:
        started = time.perf_counter()
        outcome: dict[str, Any] = {}
        try:
            yield outcome
        except CapabilityError as e:
            logger.info(f"{kind} '{name}' failed with {e.kind}: {e.message}")
            self._record(kind, name, params, started, error=e)
            raise
        except Exception as e:
            logger.exception(f"Unexpected failure in {kind} '{name}'")
            self._record(kind, name, params, started, error=e)
            raise
        else:
            self._record(kind, name, params, started, result_summary=outcome.get("summary"))

    def validate(self, name: str, arguments: dict[str, Any] | None) -> tuple[Action, ArgumentModel]:
        """Resolve an Action and validate its arguments.

        Raises:
            NotFoundError: If the Action does not exist.
            ValidationError: If the arguments do not satisfy the argument model.
        """
        action = self.get_action(name)
        try:
            args = action.arguments.model_validate(arguments if arguments is not None else {})
        except PydanticValidationError as e:
            raise to_validation_error(e) from e
        return action, args

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> ActionResult:
        """Invoke an Action, running its blocking handler in a worker thread.

        Args:
            name: Action name.
            arguments: Raw arguments from the caller.

        Returns:
            The Action's result.

        Raises:
            CapabilityError: Any taxonomy error; nothing else is expected.
        """
        params = dict(arguments) if isinstance(arguments, dict) else {"arguments": arguments}
        with self._audited("action", name, params) as outcome:
            action, args = self.validate(name, arguments)
            payload = await anyio.to_thread.run_sync(action.handler, args)
            outcome["summary"] = payload.get("summary")
        return ActionResult(action=name, payload=payload)

    def invoke_sync(self, name: str, arguments: dict[str, Any] | None = None) -> ActionResult:
        """Invoke an Action on the calling thread."""
        params = dict(arguments) if isinstance(arguments, dict) else {"arguments": arguments}
        with self._audited("action", name, params) as outcome:
            action, args = self.validate(name, arguments)
            payload = action.handler(args)
            outcome["summary"] = payload.get("summary")
        return ActionResult(action=name, payload=payload)

    def read(self, uri: str) -> KnowledgeContent:
        """Resolve a Knowledge URI, static identifiers first, then templates.

        Raises:
            NotFoundError: If no Knowledge serves the URI.
        """
        with self._audited("knowledge", uri, {}) as outcome:
            knowledge = self._knowledge.get(uri)
            params: dict[str, str] = {}
            if knowledge is None or knowledge.is_template:
                knowledge = None
                for candidate in self._knowledge.values():
                    matched = candidate.match(uri) if candidate.is_template else None
                    if matched is not None:
                        knowledge, params = candidate, matched
                        break
            if knowledge is None:
                raise NotFoundError(f"Unknown knowledge URI '{uri}'")

            body = knowledge.loader(**params)
            unit = "bytes" if isinstance(body, bytes) else "chars"
            outcome["summary"] = f"{knowledge.mime_type}, {len(body)} {unit}"
        return KnowledgeContent(uri=uri, mime_type=knowledge.mime_type, body=body)

    def guidance(self, name: str) -> str:
        """Return a Guidance template.

        Raises:
            NotFoundError: If no Guidance has this name.
        """
        with self._audited("guidance", name, {}):
            entry = self._guidance.get(name)
            if entry is None:
                raise NotFoundError(f"Unknown guidance '{name}'")
        return entry.template


# =============================================================================
# Catalog
# =============================================================================


def build_capabilities(actions: MonsterActions, cache: ReferenceCache) -> list[Capability]:
    """Assemble the fixed RAGmonsters catalog.

    Args:
        actions: Bound monster Actions.
        cache: Reference cache backing the list documents.

    Returns:
        Every Action, Knowledge and Guidance entry.
    """
    knowledge = MonsterKnowledge(cache)

    catalog: list[Capability] = [
        Action(
            "getMonsters",
            "Get a list of monsters with optional filtering, sorting, and pagination",
            GetMonstersArgs,
            actions.get_monsters,
        ),
        Action(
            "getMonsterById",
            "Get detailed information about a specific monster by ID, including "
            "keywords, abilities, flaws, strengths and weaknesses",
            GetMonsterByIdArgs,
            actions.get_monster_by_id,
        ),
        Action(
            "getMonsterByName",
            "Find monsters by full or partial name (case-insensitive, at most 5 matches)",
            GetMonsterByNameArgs,
            actions.get_monster_by_name,
        ),
        Action(
            "getMonsterByHabitat",
            "Get monsters living in an exact habitat (use getHabitats for valid names)",
            GetMonsterByHabitatArgs,
            actions.get_monster_by_habitat,
        ),
        Action(
            "compareMonsters",
            "Compare two monsters by name across category, subcategory, habitat, biome and rarity",
            CompareMonstersArgs,
            actions.compare_monsters,
        ),
        Action("getCategories", "Get all monster categories", NoArgs, actions.get_categories),
        Action(
            "getSubcategories",
            "Get monster subcategories, optionally for one category",
            GetSubcategoriesArgs,
            actions.get_subcategories,
        ),
        Action("getHabitats", "Get all monster habitats", NoArgs, actions.get_habitats),
        Action("getBiomes", "Get all monster biomes", NoArgs, actions.get_biomes),
        Action("getRarities", "Get all rarity levels, most common first", NoArgs, actions.get_rarities),
        Knowledge(
            "ragmonsters://schema",
            "RAGmonsters Dataset Schema",
            "Entities and relationships of the monster dataset",
            knowledge.schema,
        ),
        Knowledge(
            "ragmonsters://categories",
            "Monster Categories",
            "List of all monster categories (e.g., Aquatic, Elemental, Spirit/Ethereal)",
            knowledge.categories,
        ),
        Knowledge(
            "ragmonsters://subcategories",
            "Monster Subcategories",
            "List of all monster subcategories grouped by their parent category",
            knowledge.subcategories,
        ),
        Knowledge(
            "ragmonsters://habitats",
            "Monster Habitats",
            "List of all habitats where monsters can be found",
            knowledge.habitats,
        ),
        Knowledge(
            "ragmonsters://biomes",
            "Monster Biomes",
            "List of all biomes where monsters can be found",
            knowledge.biomes,
        ),
        Knowledge(
            "ragmonsters://rarities",
            "Monster Rarities",
            "The closed set of rarity levels, most common first",
            knowledge.rarities,
        ),
        Knowledge(
            "ragmonsters://docs/query-tips",
            "Query Tips",
            "How to combine the monster Actions effectively",
            knowledge.query_tips,
        ),
        Knowledge(
            "ragmonsters://images/{monster_id}",
            "Monster Image",
            "Placeholder image for a monster",
            knowledge.monster_image,
            mime_type="image/svg+xml",
        ),
    ]

    for name in list_guidance_names():
        catalog.append(Guidance(name, get_guidance_description(name), get_guidance_template(name)))

    return catalog
