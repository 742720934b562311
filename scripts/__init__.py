"""Command line tools for importing and editing notes stored in Firestore."""
