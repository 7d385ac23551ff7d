"""Quickstart example for flexexpander.

This example demonstrates nested placeholder expansion, format directives,
scripts and error collection.

Note: Examples pass locale and time_zone explicitly so that output does not
depend on the machine running them. In production the defaults come from
the context or the process environment.
"""

from datetime import UTC, datetime
from decimal import Decimal

from flexexpander import FlexibleStringExpander, expand_string

# Example 1: Simple placeholder
print("=" * 50)
print("Example 1: Simple Placeholder")
print("=" * 50)

print(expand_string("Hello ${name}!", {"name": "World"}))
# Output: Hello World!

# Example 2: Nested placeholders
print("\n" + "=" * 50)
print("Example 2: Nested Placeholders")
print("=" * 50)

price = FlexibleStringExpander("${prices.${currency}}", locale="en_US")
result = price.expand({"prices": {"EUR": Decimal("9.50")}, "currency": "EUR"})
print(result.text)
# Output: 9.5
print(repr(result.value))
# Output: Decimal('9.50')

# Example 3: Currency directive
print("\n" + "=" * 50)
print("Example 3: Currency Directive")
print("=" * 50)

total = FlexibleStringExpander("Total: ${order.total?currency(${order.currency})}")
order = {"total": Decimal("1234.5"), "currency": "USD"}
print(total.expand_string({"order": order}, locale="en_US"))
# Output: Total: $1,234.50
print(total.expand_string({"order": {**order, "currency": "EUR"}, "locale": "de_DE"}))
# Output: Total: 1.234,50 €

# Example 4: Escapes and unterminated placeholders stay literal
print("\n" + "=" * 50)
print("Example 4: Literal Text")
print("=" * 50)

print(expand_string(r"Literal \${name} and ${unclosed", {"name": "x"}))
# Output: Literal \${name} and ${unclosed

# Example 5: Scripts
print("\n" + "=" * 50)
print("Example 5: Jinja2 Scripts")
print("=" * 50)

print(expand_string("${jinja: items|length} items", {"items": ["a", "b", "c"]}))
# Output: 3 items

# Example 6: Dates follow the time zone
print("\n" + "=" * 50)
print("Example 6: Time Zones")
print("=" * 50)

when = datetime(2024, 7, 1, 12, 0, tzinfo=UTC)
print(expand_string("${when}", {"when": when}, time_zone="America/New_York"))
# Output: 2024-07-01 08:00:00.000

# Example 7: Errors are collected, never raised
print("\n" + "=" * 50)
print("Example 7: Error Collection")
print("=" * 50)

greeting = FlexibleStringExpander("Hi ${user.name}!", locale="en_US")
result = greeting.expand({"user": None})
print(result.text)
# Output: Hi !
for error in result.errors:
    if error.diagnostic is not None:
        print(error.diagnostic.code.name)
# Output: NULL_DEREFERENCE
