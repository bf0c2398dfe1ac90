"""Wedding studio bookings, production tracking and payment ledgers."""
