"""Record field resolution."""
