"""
Minimal example comparing two versions of a user profile.

Run this with:
    python examples/minimal.py

The friends list is reordered and extended; with array sorting enabled
only the genuinely new friend is reported, alongside the age and hobby
changes. Stream mode keeps array order significant.
"""

from driftline import CompareMode, compare, summarize

OLD_JSON = """
{
    "user": {
        "name": "Alice",
        "age": 30,
        "hobbies": ["reading", "cycling"],
        "friends": [
            {"id": 2, "name": "Bob"},
            {"id": 1, "name": "Charlie"}
        ]
    }
}
"""

NEW_JSON = """
{
    "user": {
        "name": "Alice",
        "age": 31,
        "hobbies": ["reading", "swimming"],
        "friends": [
            {"id": 1, "name": "Charlie"},
            {"id": 2, "name": "Bob"},
            {"id": 3, "name": "David"}
        ]
    }
}
"""


def main() -> None:
    for mode in (CompareMode.HYBRID, CompareMode.STREAM):
        differences = compare(OLD_JSON, NEW_JSON, mode)
        summary = summarize(differences)

        print(f"{mode.value}: {summary.total} difference(s)")
        for d in differences:
            print(f"  {d}")
        print(f"  fingerprint: {summary.fingerprint[:16]}...\n")


if __name__ == "__main__":
    main()
