"""QuickHealth patient portal API."""
