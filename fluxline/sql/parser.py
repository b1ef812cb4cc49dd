"""
Query interpreter - tokenizer plus recursive descent parser

Parses the query subset:
- SHOW DATABASES / SHOW MEASUREMENTS
- CREATE DATABASE name / USE name
- SELECT * | field | agg(field) FROM measurement
      [WHERE time >= T [AND time <= T]]
      [GROUP BY time(Nm)]

Keywords are case-insensitive, identifiers keep their case. Time literals are
nanoseconds, or milliseconds with an "ms" suffix. Anything after the GROUP BY
clause (fill(null), ORDER BY time ASC, ...) is accepted and ignored.
"""

import logging
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from fluxline.protocol.values import parse_int64
from fluxline.sql.ast_nodes import (
    DEFAULT_BUCKET_WIDTH_NS,
    NANOS_PER_MILLI,
    NANOS_PER_MINUTE,
    Aggregation,
    Command,
    QueryDescriptor,
)

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(
    r"""
    \s*(
        "(?:[^"\\]|\\.)*"       # quoted identifier
      | <> | [<>!=]=?           # comparison operators
      | [(),]                   # punctuation
      | [^\s(),<>=!]+           # words, numbers, escaped identifiers
    )
    """,
    re.VERBOSE,
)
_MINUTES_RE = re.compile(r"([0-9]+)m")
_AGGREGATIONS = {agg.value: agg for agg in Aggregation}


class QueryErrorKind(Enum):
    """Classification of a query that could not be interpreted"""

    INVALID_SYNTAX = "invalid syntax"
    INVALID_TIME_FORMAT = "invalid time format"
    INVALID_QUERY = "invalid query"
    MISSING_MEASUREMENT = "missing measurement"


class QueryError(ValueError):
    """Raised when query interpretation fails"""

    def __init__(self, kind: QueryErrorKind, message: str, literal: str = ""):
        super().__init__(message)
        self.kind = kind
        self.literal = literal


@dataclass(frozen=True)
class Token:
    """A token and its span in the original query text"""

    text: str
    start: int
    end: int

    @property
    def upper(self) -> str:
        return self.text.upper()


def strip_identifier_quotes(text: str) -> str:
    """
    Remove surrounding quotes from a measurement or field name

    Quotes are trimmed first, then any remaining backslashes and quotes, so
    both "cpu" and the escaped artifact \\"cpu\\" become cpu.
    """
    return text.strip('"').strip('\\"')


class QueryParser:
    """
    Simple recursive descent parser for the query subset

    Grammar (simplified):
        QUERY       := SHOW DATABASES | SHOW MEASUREMENTS
                     | CREATE DATABASE name | USE name | SELECT_STMT
        SELECT_STMT := SELECT selector FROM measurement [WHERE conditions] [GROUP BY group]
        selector    := * | field | agg ( field )
        conditions  := condition [AND condition]*
        condition   := time >= literal | time <= literal | (ignored)
        group       := time ( N m ) | (anything, default bucket width)
    """

    def __init__(self, query: str, now_ns: Optional[int] = None):
        self.query = query.strip()
        self.now_ns = now_ns if now_ns is not None else time.time_ns()
        self.tokens = self._tokenize(self.query)
        self.pos = 0

    def _tokenize(self, query: str) -> List[Token]:
        """Split the query into tokens, remembering each token's span"""
        tokens = []
        pos = 0
        while pos < len(query):
            match = _TOKEN_RE.match(query, pos)
            if not match:
                break
            tokens.append(Token(match.group(1), match.start(1), match.end(1)))
            pos = match.end()
        return tokens

    def current(self) -> Optional[Token]:
        """Get current token without advancing"""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def peek(self, offset: int = 1) -> Optional[Token]:
        """Look ahead at token"""
        pos = self.pos + offset
        if pos < len(self.tokens):
            return self.tokens[pos]
        return None

    def consume(self, expected: Optional[str] = None) -> Token:
        """
        Consume and return current token, optionally checking it matches expected

        Raises:
            QueryError: If expected token doesn't match or no more tokens
        """
        token = self.current()
        if token is None:
            raise QueryError(
                QueryErrorKind.INVALID_QUERY,
                f"unexpected end of query, expected: {expected}",
                self.query,
            )
        if expected and token.upper != expected.upper():
            raise QueryError(
                QueryErrorKind.INVALID_QUERY,
                f"expected '{expected}' but got '{token.text}'",
                token.text,
            )
        self.pos += 1
        return token

    def _is_keyword(self, token: Optional[Token], keyword: str) -> bool:
        return token is not None and token.upper == keyword

    def _at_group_by(self) -> bool:
        return self._is_keyword(self.current(), "GROUP") and self._is_keyword(self.peek(), "BY")

    def parse(self) -> QueryDescriptor:
        """Parse the query into a descriptor"""
        first = self.current()
        if first is None:
            raise QueryError(QueryErrorKind.INVALID_QUERY, "empty query", self.query)

        if first.upper == "SHOW":
            return self._parse_show()
        if first.upper == "CREATE" and self._is_keyword(self.peek(), "DATABASE"):
            return self._parse_named(Command.CREATE_DATABASE, 2)
        if first.upper == "USE":
            return self._parse_named(Command.USE, 1)
        if first.upper == "SELECT":
            return self._parse_select()

        raise QueryError(
            QueryErrorKind.INVALID_QUERY, f"unsupported query: {self.query}", self.query
        )

    def _parse_show(self) -> QueryDescriptor:
        """Parse SHOW DATABASES / SHOW MEASUREMENTS"""
        words = [token.upper for token in self.tokens]
        if words == ["SHOW", "DATABASES"]:
            return QueryDescriptor(command=Command.SHOW_DATABASES)
        if words == ["SHOW", "MEASUREMENTS"]:
            return QueryDescriptor(command=Command.SHOW_MEASUREMENTS)
        raise QueryError(
            QueryErrorKind.INVALID_QUERY, f"unsupported query: {self.query}", self.query
        )

    def _parse_named(self, command: Command, index: int) -> QueryDescriptor:
        """
        Parse CREATE DATABASE name / USE name

        The name is taken by whitespace position, exactly as written.
        """
        words = self.query.split()
        if len(words) <= index:
            raise QueryError(
                QueryErrorKind.INVALID_SYNTAX,
                f"invalid {' '.join(words[:index]).upper()} syntax",
                self.query,
            )
        return QueryDescriptor(command=command, database=words[index])

    def _parse_select(self) -> QueryDescriptor:
        """Parse SELECT statement"""
        select = self.consume("SELECT")

        from_index = self._find_keyword("FROM")
        if from_index is None:
            raise QueryError(QueryErrorKind.INVALID_QUERY, "missing FROM clause", self.query)
        from_token = self.tokens[from_index]

        aggregation, field = self._parse_selector(
            self.tokens[self.pos : from_index],
            self.query[select.end : from_token.start].strip(),
        )
        self.pos = from_index + 1

        measurement = self._parse_measurement(from_token)

        descriptor = QueryDescriptor(
            command=Command.SELECT_POINTS,
            measurement=measurement,
            field=field,
            aggregation=aggregation,
            start_ns=0,
            end_ns=self.now_ns,
        )

        if self._is_keyword(self.current(), "WHERE"):
            self._parse_where(descriptor)

        width = None
        if self._at_group_by():
            width = self._parse_group_by()
        # Raw selects are never bucketed
        if aggregation is None:
            width = None
        elif width is None:
            width = DEFAULT_BUCKET_WIDTH_NS
        descriptor.bucket_width_ns = width

        if self.current() is not None:
            logger.debug("Ignoring trailing clauses: %r", self.query[self.current().start :])

        logger.debug("Interpreted %r as %r", self.query, descriptor)
        return descriptor

    def _find_keyword(self, keyword: str) -> Optional[int]:
        for index in range(self.pos, len(self.tokens)):
            if self.tokens[index].upper == keyword:
                return index
        return None

    def _parse_selector(self, tokens: List[Token], text: str):
        """
        Parse the SELECT list: *, a field name, or agg(field)

        Returns:
            Tuple of (aggregation or None, field name)
        """
        if not tokens:
            raise QueryError(QueryErrorKind.INVALID_QUERY, "missing field selector", self.query)

        if any(token.text == "," for token in tokens):
            raise QueryError(
                QueryErrorKind.INVALID_QUERY, f"only one field can be selected: {text}", text
            )

        if len(tokens) > 1 and tokens[1].text == "(":
            function = tokens[0].text.lower()
            if function not in _AGGREGATIONS:
                raise QueryError(
                    QueryErrorKind.INVALID_QUERY, f"unsupported function: {function}", text
                )
            if tokens[-1].text != ")":
                raise QueryError(
                    QueryErrorKind.INVALID_QUERY, f"unterminated function call: {text}", text
                )
            field = strip_identifier_quotes(
                self.query[tokens[1].end : tokens[-1].start].strip()
            )
            if not field:
                raise QueryError(
                    QueryErrorKind.INVALID_QUERY, f"missing field in {function}()", text
                )
            return _AGGREGATIONS[function], field

        field = strip_identifier_quotes(text)
        if not field:
            raise QueryError(QueryErrorKind.INVALID_QUERY, "missing field selector", text)
        return None, field

    def _parse_measurement(self, from_token: Token) -> str:
        """
        Parse the measurement: the raw text up to WHERE, GROUP BY or the end

        Examples:
            cpu -> cpu
            "cpu" -> cpu
            \\"my measurement\\" -> my measurement
        """
        end = len(self.query)
        while self.current() is not None:
            if self._is_keyword(self.current(), "WHERE") or self._at_group_by():
                end = self.current().start
                break
            self.pos += 1

        measurement = strip_identifier_quotes(self.query[from_token.end : end].strip())
        if not measurement:
            raise QueryError(
                QueryErrorKind.MISSING_MEASUREMENT,
                "could not determine measurement from query",
                self.query,
            )
        return measurement

    def _parse_where(self, descriptor: QueryDescriptor) -> None:
        """
        Parse WHERE clause, keeping only the time bounds

        Example: WHERE time >= 1000ms and time <= 2000ms
        """
        self.consume("WHERE")

        while self.current() is not None and not self._at_group_by():
            condition = []
            while (
                self.current() is not None
                and not self._is_keyword(self.current(), "AND")
                and not self._at_group_by()
            ):
                condition.append(self.consume())

            self._apply_condition(condition, descriptor)

            if self._is_keyword(self.current(), "AND"):
                self.consume("AND")

    def _apply_condition(self, condition: List[Token], descriptor: QueryDescriptor) -> None:
        if len(condition) < 2 or condition[0].text.lower() != "time":
            logger.debug("Ignoring condition: %s", " ".join(t.text for t in condition))
            return

        operator = condition[1].text
        if operator not in (">=", "<="):
            logger.debug("Ignoring time condition with operator %s", operator)
            return

        literal = condition[2].text if len(condition) > 2 else ""
        value = self._parse_time_literal(literal)
        if operator == ">=":
            descriptor.start_ns = value
        else:
            descriptor.end_ns = value

    def _parse_time_literal(self, literal: str) -> int:
        """
        Parse a time bound into nanoseconds

        Examples:
            1000ms -> 1000000000
            1465839830100400200 -> 1465839830100400200
        """
        if literal.lower().endswith("ms"):
            value = parse_int64(literal[:-2])
            multiplier = NANOS_PER_MILLI
        else:
            value = parse_int64(literal)
            multiplier = 1

        if value is None:
            raise QueryError(
                QueryErrorKind.INVALID_TIME_FORMAT, f"invalid time format: {literal!r}", literal
            )
        return value * multiplier

    def _parse_group_by(self) -> Optional[int]:
        """
        Parse GROUP BY clause

        Only time(Nm) sets a bucket width; any other grouping returns None so
        the caller can fall back to the default width.
        """
        self.consume("GROUP")
        self.consume("BY")

        tokens = [self.current(), self.peek(), self.peek(2), self.peek(3)]
        if (
            self._is_keyword(tokens[0], "TIME")
            and tokens[1] is not None
            and tokens[1].text == "("
            and tokens[2] is not None
            and tokens[3] is not None
            and tokens[3].text == ")"
        ):
            match = _MINUTES_RE.fullmatch(tokens[2].text)
            if match and int(match.group(1)) > 0:
                self.pos += 4
                return int(match.group(1)) * NANOS_PER_MINUTE

        logger.debug("Unrecognized GROUP BY clause, using the default bucket width")
        return None


def interpret(query: str, now_ns: Optional[int] = None) -> QueryDescriptor:
    """
    Convenience function to interpret a query

    Args:
        query: Query text
        now_ns: Value of "now" in nanoseconds, used as the default end of the
            time range. Defaults to the wall clock.

    Returns:
        Parsed QueryDescriptor

    Raises:
        QueryError: If the query is invalid

    Examples:
        >>> interpret("SHOW MEASUREMENTS").command
        <Command.SHOW_MEASUREMENTS: 'SHOW_MEASUREMENTS'>
        >>> interpret("SELECT mean(value) FROM cpu GROUP BY time(1m)").bucket_width_ns
        60000000000
    """
    return QueryParser(query, now_ns=now_ns).parse()
