from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.tokens import AccessToken

TOKEN_VERSION_CLAIM = 'token_version'


def issue_access_token(user) -> str:
    """Access token stamped with the user's current token version."""
    token = AccessToken.for_user(user)
    token[TOKEN_VERSION_CLAIM] = user.token_version
    return str(token)


class RevocableJWTAuthentication(JWTAuthentication):
    """JWT authentication that rejects tokens issued before the last logout."""

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if validated_token.get(TOKEN_VERSION_CLAIM) != user.token_version:
            raise InvalidToken('Token has been revoked')
        return user
