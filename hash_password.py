#!/usr/bin/env python3
"""Hash the admin password with Argon2 for the ADMIN_PASSWORD setting."""
import sys

from eventsync.core.security import get_password_hash

if len(sys.argv) != 2:
    print("Usage: python hash_password.py 'your-password-here'")
    print()
    print("Example:")
    print("  python hash_password.py 'MySecurePassword'")
    sys.exit(1)

password = sys.argv[1]

if len(password) < 8:
    print("❌ Error: Password must be at least 8 characters long")
    sys.exit(1)

password_hash = get_password_hash(password)

print("✅ Password hash generated!")
print()
print("Add this to your .env file (ADMIN_USERNAME defaults to 'admin'):")
print("-" * 80)
print(f"ADMIN_PASSWORD={password_hash}")
print("-" * 80)
