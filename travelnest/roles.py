from enum import StrEnum


class UserRole(StrEnum):
    GUEST = "guest"  # default for every new account
    HOST = "host"  # may list rooms and see bookings made on them
    ADMIN = "admin"  # manages users and reads platform stats


class UserStatus(StrEnum):
    VERIFIED = "Verified"
    REQUESTED = "Requested"  # asked to become a host, awaiting admin

