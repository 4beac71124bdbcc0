from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class EmailSettings(BaseSettings):
    """Configuration du module email.

    Les paramètres sont chargés depuis les variables d'environnement avec le préfixe EMAIL_.
    """
    SMTP_HOST: str = "smtp.ethereal.email"
    SMTP_PORT: int = 587
    SENDER_EMAIL: Optional[str] = None
    SENDER_PASSWORD: Optional[str] = None
    USE_TLS: bool = True   # STARTTLS après connexion
    USE_SSL: bool = False  # SSL implicite (port 465)
    DEFAULT_FROM_NAME: str = "SearchGear"

    # Délais en secondes : connexion TCP + bannière du serveur, puis chaque réponse SMTP
    CONNECTION_TIMEOUT: float = 5.0
    SOCKET_TIMEOUT: float = 10.0

    # Une seule devise par déploiement, utilisée partout dans les emails
    CURRENCY_CODE: str = "PHP"
    CURRENCY_SYMBOL: str = "₱"
    DATE_FORMAT: str = "%A, %B %d, %Y"

    SUPPORT_PHONE: str = "+63 XXX XXX XXXX"
    QUOTE_VALIDITY_DAYS: int = 30

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_",
        case_sensitive=True,
        env_file=".env",
        extra="ignore",
    )


# Instance globale des paramètres
settings = EmailSettings()
