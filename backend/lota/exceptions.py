"""Error taxonomy for the Lota session.

Only ``JoinRejected`` and ``InvalidConfig`` ever reach a client, as an
``error_msg``. The rest are dropped at the session boundary.
"""


class LotaException(Exception):
    """Base class for every session error."""
    pass


class AuthorizationDenied(LotaException):
    """A non-admin issued an admin-only command."""
    pass


class PreconditionViolated(LotaException):
    """The command is not valid for the current status."""
    pass


class InvalidConfig(PreconditionViolated):
    """start_game carried a config that cannot be played."""
    pass


class JoinRejected(LotaException):
    """Base for join refusals; the message is shown to the requester."""
    message = 'No se pudo entrar al juego.'

    def __init__(self, message=None):
        super().__init__(message or self.message)


class NoAdminYet(JoinRejected):
    message = 'El Administrador debe entrar primero.'


class BadCredential(JoinRejected):
    message = 'Clave incorrecta.'


class AdminAlreadyPresent(JoinRejected):
    message = 'Ya hay un Administrador en el juego.'


class InvariantBreach(LotaException):
    """status and pending_claim disagree."""
    pass
