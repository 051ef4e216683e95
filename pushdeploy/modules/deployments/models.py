# Supabase table: deployments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- repository_name: text (primary key) - canonical "owner/repo", the upsert key
- status: text (not null) - provider vocabulary (success, failure, cancelled, queued, in_progress, ...) or 'unknown'
- preview_url: text (nullable) - https://{branch}.{preview_domain}
- updated_at: timestamp (default: now()) - rewritten on every upsert

One row per repository; every webhook delivery overwrites status and preview_url.
"""

UNKNOWN_STATUS = "unknown"
