"""BuildOffice Engine — Configuration, error hierarchy, audit logging."""
