"""
=============================================================================
PATH PATTERN COMPILER
=============================================================================

Turns a route template into a matcher plus the ordered names of its
parameters.

=============================================================================
TEMPLATE SYNTAX
=============================================================================

Templates are split on "/". A segment starting with ":" is a parameter;
every other segment is literal text.

    Template:  /user/:userid/hello
                 │      │      │
                 ▼      ▼      ▼
    Segments:  "user"  ":userid"  "hello"
               literal  parameter  literal

    param_names = ("userid",)

Two matching strategies:

1. NO PARAMETERS: plain string equality.

   Pattern: /hello/world
   Matches: /hello/world
   Doesn't match: /hello/world/   /hello/worlds   /hello

2. PARAMETERS: compiled to a full-match regex.

   Pattern: /hello/:and/good/:morning
   Regex:   ^/hello/([^/]+)/good/([^/]+)$
                    ───────      ───────
                    group 1      group 2
                      │            │
                      ▼            ▼
   param_names:    "and"       "morning"     (bound by position)

   Matches: /hello/12/good/54 → {"and": "12", "morning": "54"}
   Doesn't match: /hello/12/good/54/   (trailing slash = extra segment)
                  /hello//good/54      (parameter values are never empty)

Literal segments are regex-escaped, so "/v1.0/:id" only matches a literal
dot. There are no wildcards and no trailing-slash leniency.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import re

from ..errors import PatternError


PARAM_MARKER = ":"

# One or more characters that are not a slash
PARAM_REGEX = "([^/]+)"


@dataclass(frozen=True)
class PathPattern:
    """
    Compiled route template. Immutable; build with compile_pattern().

    Attributes:
        template:    The template as registered ("/user/:userid")
        param_names: Parameter names, left to right ("userid",)
        regex:       Full-match regex, or None for literal-only templates
    """

    template: str
    param_names: Tuple[str, ...] = ()
    regex: Optional[re.Pattern] = field(default=None, repr=False, compare=False)

    @property
    def is_parameterized(self) -> bool:
        return bool(self.param_names)

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """
        Match a request path against this pattern.

        Returns:
            Parameter name → captured value on a match ({} for literal
            templates), None otherwise.
        """
        # Fast path: literal templates never need tokenizing
        if self.regex is None:
            return {} if path == self.template else None

        found = self.regex.fullmatch(path)
        if found is None:
            return None
        return dict(zip(self.param_names, found.groups()))

    def matches(self, path: str) -> bool:
        return self.match(path) is not None


def compile_pattern(template: str) -> PathPattern:
    """
    Compile a route template.

    Raises:
        PatternError: the template does not start with "/", has a
            parameter segment without a name, or repeats a parameter name.

    Example:
        >>> p = compile_pattern("/user/:userid")
        >>> p.param_names
        ('userid',)
        >>> p.match("/user/14")
        {'userid': '14'}
    """
    if not isinstance(template, str) or not template.startswith("/"):
        raise PatternError(f"Route template must start with '/': {template!r}", template)

    param_names: List[str] = []
    regex_parts: List[str] = []

    for segment in template.split("/"):
        if segment.startswith(PARAM_MARKER):
            name = segment[len(PARAM_MARKER):]
            if not name:
                raise PatternError(f"Unnamed parameter in {template!r}", template)
            if name in param_names:
                raise PatternError(f"Duplicate parameter {name!r} in {template!r}", template)
            param_names.append(name)
            regex_parts.append(PARAM_REGEX)
        else:
            regex_parts.append(re.escape(segment))

    if not param_names:
        return PathPattern(template=template)

    return PathPattern(
        template=template,
        param_names=tuple(param_names),
        regex=re.compile("/".join(regex_parts)),
    )
