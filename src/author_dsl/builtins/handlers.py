"""Built-in type handlers for author DSL.

This module defines handlers for the common typed keys of author files:
links, e-mail addresses, dates, phone numbers and GitHub accounts.

Every handler returns a typed mapping `{'type': ..., 'value': ...}`
enriched with handler-specific fields, and reports malformed values
as validation warnings rather than errors.
"""

from datetime import UTC, datetime
from re import compile as regexp
from typing import TYPE_CHECKING

from pydantic import HttpUrl, TypeAdapter, ValidationError

from author_dsl.extensions import Plugin, TypeHandler
from author_dsl.values import MAPPINGS, VALUE_FIELD, make_typed

if TYPE_CHECKING:
    from author_dsl.context import PluginContext
    from author_dsl.values import RuntimeValue

BUILTIN_AUTHOR = 'author-dsl'

MAILTO_PREFIX = 'mailto:'

URL_SCHEME_PATTERN = regexp(r'^https?://')
EMAIL_PATTERN = regexp(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = regexp(r'^\+?[0-9\s\-().]{7,20}$')
PHONE_SEPARATORS_PATTERN = regexp(r'[\s\-().]')
GITHUB_PATTERN = regexp(r'^[a-zA-Z0-9](?:[a-zA-Z0-9]|-(?=[a-zA-Z0-9])){0,38}$')

GITHUB_URL = 'https://github.com/'

_http_url = TypeAdapter(HttpUrl)


def _text(value: 'RuntimeValue', field: str = VALUE_FIELD) -> str | None:
    """Extract the text of a processed value.

    Validators receive either a plain string or a typed mapping.
    """
    if isinstance(value, str):
        return value

    if isinstance(value, MAPPINGS) and isinstance(text := value.get(field), str):
        return text

    return None


def _parse_date(value: str) -> datetime | None:
    """Parse an ISO 8601 date or datetime, assuming UTC when naive."""
    try:
        date = datetime.fromisoformat(value)
    except ValueError:
        return None

    if date.tzinfo is None:
        date = date.replace(tzinfo=UTC)

    return date


def _process_url(value: str, type_name: str, context: 'PluginContext') -> 'RuntimeValue':  # noqa: ARG001
    """Strip the scheme of a link, keeping the original text.

    A `mailto:` link is reduced to the address.
    """
    if value.startswith(MAILTO_PREFIX):
        return make_typed(type_name, value.removeprefix(MAILTO_PREFIX))

    return {
        **make_typed(type_name, URL_SCHEME_PATTERN.sub('', value)),
        'original': value,
    }


def _validate_url(value: 'RuntimeValue', type_name: str, context: 'PluginContext') -> list[str] | None:  # noqa: ARG001
    """Check that a link is a valid HTTP(S) URL.

    Links without a scheme are checked as `https://` links.
    """
    link = _text(value, 'original') or _text(value)
    if not link:
        return None

    if not URL_SCHEME_PATTERN.match(link):
        link = f'https://{link}'

    try:
        _http_url.validate_python(link)
    except ValidationError:
        return [f'Invalid URL format: {link}']

    return None


def _process_email(value: str, type_name: str, context: 'PluginContext') -> 'RuntimeValue':  # noqa: ARG001
    """Strip the `mailto:` prefix of an address."""
    return make_typed(type_name, value.removeprefix(MAILTO_PREFIX))


def _validate_email(value: 'RuntimeValue', type_name: str, context: 'PluginContext') -> list[str] | None:  # noqa: ARG001
    """Check the basic shape of an e-mail address."""
    if (address := _text(value)) and not EMAIL_PATTERN.match(address):
        return [f'Invalid email format: {address}']

    return None


def _process_date(value: str, type_name: str, context: 'PluginContext') -> 'RuntimeValue':  # noqa: ARG001
    """Attach a millisecond timestamp and ISO form to a date.

    Unparsable dates are kept as text and reported by the validator.
    """
    result = make_typed(type_name, value)

    if (date := _parse_date(value)) is not None:
        result['timestamp'] = int(date.timestamp() * 1000)
        result['iso'] = date.isoformat()

    return result


def _validate_date(value: 'RuntimeValue', type_name: str, context: 'PluginContext') -> list[str] | None:  # noqa: ARG001
    """Check that a date is in ISO 8601 format."""
    if (text := _text(value)) and _parse_date(text) is None:
        return [f'Invalid date format: {text}']

    return None


def _process_phone(value: str, type_name: str, context: 'PluginContext') -> 'RuntimeValue':  # noqa: ARG001
    """Remove separators from a phone number, keeping the formatted text."""
    return {
        **make_typed(type_name, PHONE_SEPARATORS_PATTERN.sub('', value)),
        'formatted': value,
    }


def _validate_phone(value: 'RuntimeValue', type_name: str, context: 'PluginContext') -> list[str] | None:  # noqa: ARG001
    """Check that a phone number has 7 to 20 digits or separators."""
    if (number := _text(value)) and not PHONE_PATTERN.match(number):
        return [f'Invalid phone format: {number}']

    return None


def _process_github(value: str, type_name: str, context: 'PluginContext') -> 'RuntimeValue':  # noqa: ARG001
    """Strip the `@` prefix of an account and attach its profile link."""
    account = value.removeprefix('@')

    return {
        **make_typed(type_name, account),
        'url': f'{GITHUB_URL}{account}',
    }


def _validate_github(value: 'RuntimeValue', type_name: str, context: 'PluginContext') -> list[str] | None:  # noqa: ARG001
    """Check an account name against GitHub username rules."""
    if (account := _text(value)) and not GITHUB_PATTERN.match(account):
        return [f'Invalid GitHub username format: {account}']

    return None


url = Plugin(
    name='url-type',
    description='URL type validation and processing',
    author=BUILTIN_AUTHOR,
    type_handler=TypeHandler(
        types=['url'],
        processor=_process_url,
        validator=_validate_url,
    ),
)

email = Plugin(
    name='email-type',
    description='Email type validation and processing',
    author=BUILTIN_AUTHOR,
    type_handler=TypeHandler(
        types=['email'],
        processor=_process_email,
        validator=_validate_email,
    ),
)

date = Plugin(
    name='date-type',
    description='Date type validation and processing',
    author=BUILTIN_AUTHOR,
    type_handler=TypeHandler(
        types=['date'],
        processor=_process_date,
        validator=_validate_date,
    ),
)

phone = Plugin(
    name='phone-type',
    description='Phone number type validation and processing',
    author=BUILTIN_AUTHOR,
    type_handler=TypeHandler(
        types=['phone'],
        processor=_process_phone,
        validator=_validate_phone,
    ),
)

github = Plugin(
    name='github-type',
    description='GitHub username type validation and processing',
    author=BUILTIN_AUTHOR,
    type_handler=TypeHandler(
        types=['github'],
        processor=_process_github,
        validator=_validate_github,
    ),
)
