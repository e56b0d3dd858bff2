"""Demonstrates custom assertions and extension.

* `create_assertion` describes a call shape with phrases and validators.
* `extend_with` returns a new `check`/`check_async` pair; the defaults are untouched.
* Implementations may return a bool, an `AssertionFailure`, or a validator.
"""

import asyncio

from phrasal import AssertionFailure, create_assertion, create_async_assertion, extend_with


def is_palindrome(text: str) -> AssertionFailure | bool:
    if text == text[::-1]:
        return True
    return AssertionFailure(actual=text, expected=text[::-1], message=f"{text!r} is not a palindrome")


async def responds_within(url: str, seconds: float) -> bool:
    await asyncio.sleep(0.01)
    return seconds > 0.01


check, check_async = extend_with(
    [
        create_assertion([str, "to be a palindrome"], is_palindrome, {"category": "strings"}),
        create_assertion([int, ("to be even", "to be divisible by two")], lambda n: n % 2 == 0),
        create_async_assertion([str, "to respond within", float], responds_within),
    ]
)


def main() -> None:
    check("racecar", "to be a palindrome")
    check("phrasal", "not to be a palindrome")
    check(10, "to be even", "and", "to be greater than", 5)
    asyncio.run(check_async("https://example.com", "to respond within", 1.0))


if __name__ == "__main__":
    main()
