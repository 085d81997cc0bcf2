"""Quickstart: populate a DTO from a mapping and export it back.

Declare fields as class annotations, pass raw data to the constructor and
read the fields through attributes, indexed access or the export methods.
"""

from __future__ import annotations

from dtowire import DataTransferObject


class User(DataTransferObject):
    name: str
    email: str
    active: bool = True


def main() -> None:
    user = User({"name": "Ada", "email": "ada@example.com"})

    print(f"name={user.name}")  # => name=Ada
    print(f"fields={','.join(User.populatable_fields())}")  # => fields=name,email,active

    user["email"] = "ada@lovelace.dev"
    print(f"email={user.get_email()}")  # => email=ada@lovelace.dev

    del user["active"]
    print(f"active_set={'active' in user}")  # => active_set=False

    print(user.to_dict())  # => {'name': 'Ada', 'email': 'ada@lovelace.dev'}
    print(user)  # => {"name": "Ada", "email": "ada@lovelace.dev"}


if __name__ == "__main__":
    main()
