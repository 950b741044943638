"""Services - analytics, share links and public views."""
