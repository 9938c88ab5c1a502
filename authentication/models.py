from django.db import models


class VoterAuthorization(models.Model):
    """
    Grant allowing an identity to cast votes in any voting session.
    Append-only: rows are never updated or deleted (no deauthorization).
    """
    identity = models.CharField(
        max_length=255,
        unique=True,
        verbose_name="Identity",
        help_text="Normalized voter identity"
    )
    authorized_at = models.DateTimeField(verbose_name="Authorized At")

    class Meta:
        verbose_name = "Voter Authorization"
        verbose_name_plural = "Voter Authorizations"
        ordering = ['authorized_at', 'id']

    def __str__(self):
        return f"{self.identity}"

    @classmethod
    def is_authorized(cls, identity):
        """Check if an (already normalized) identity has been authorized."""
        return cls.objects.filter(identity=identity).exists()
