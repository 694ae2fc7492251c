"""
Grant the administrator role to a phone number.
The account is created (already verified) when it does not exist yet, so the
first admin can sign in with the normal one-time code flow.
"""
import argparse
import asyncio

from vod.infrastructure.database.session import dispose_engine, get_session, init_db
from vod.modules.otp import InvalidPhoneNumberError, normalize_phone_number
from vod.modules.users import UserService


async def grant_admin(phone_number: str) -> None:
    await init_db()

    async for db in get_session():
        service = UserService.with_session(db)
        existing = await service.get_by_phone(phone_number)
        if existing is not None and existing.is_admin():
            print(f"{phone_number} is already an administrator")
            break

        user = await service.grant_admin(phone_number)
        print("=" * 50)
        print("Administrator ready")
        print("=" * 50)
        print(f"Phone number: {user.phone_number}")
        print(f"User id:      {user.id}")
        print("=" * 50)
        print("Sign in via /api/auth/send-otp and /api/auth/verify-otp")
        print("=" * 50)

    await dispose_engine()


def main() -> None:
    parser = argparse.ArgumentParser(description="Grant the admin role to a phone number")
    parser.add_argument("phone_number", help="E.164 phone number, e.g. +15551234567")
    args = parser.parse_args()
    try:
        phone_number = normalize_phone_number(args.phone_number)
    except InvalidPhoneNumberError as exc:
        parser.error(str(exc))
    asyncio.run(grant_admin(phone_number))


if __name__ == "__main__":
    main()
