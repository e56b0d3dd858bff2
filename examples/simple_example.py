"""Simple example of using phrasal assertions."""

from phrasal import AssertionFailedError, UnknownAssertionError, check


# 1. Plain relations
check("hello", "to be a string")
check(5, "to be greater than", 3)
check([1, 2, 3], "to contain", 2)

# 2. Negation is derived from every phrase
check(5, "not to be a string")

# 3. Chaining applies further checks to the same subject
check(42, "to be a number", "and", "to be between", 1, "and", 100, "and", lambda n: n % 2 == 0)

# 4. Failures carry actual/expected values and a diff
try:
    check({"name": "Alice", "age": 30}, "to equal", {"name": "Alice", "age": 31})
except AssertionFailedError as err:
    print(err)

# 5. Calls no assertion understands are reported separately from failures
try:
    check(42, "to do something impossible")
except UnknownAssertionError as err:
    print(err)
