from seo_audit.services.checks.base import AuditContext, CheckUnit, check, network_check
