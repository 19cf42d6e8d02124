"""Hierarquia de exceções do portal.

Cada classe corresponde a um desfecho distinto da API, com status HTTP e código
estável para o cliente:

    PortalError
    +-- AuthenticationError   401  token ausente, inválido ou expirado
    +-- AuthorizationDenied   403  capacidade ou transição negada
    +-- ValidationError       400  payload fora do contrato
    +-- NotFoundError         404
    +-- ConflictError         409
    +-- DependencyError       500  falha do banco ou do provedor de identidade

Negação de permissão e erro de validação nunca são convertidos um no outro.
"""


class PortalError(Exception):
    status_code = 500
    code = "portal_error"
    default_message = "Erro interno"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(PortalError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Token inválido ou expirado"


class AuthorizationDenied(PortalError):
    status_code = 403
    code = "forbidden"
    default_message = "Permissão insuficiente"

    def __init__(self, message: str | None = None, action: str | None = None):
        super().__init__(message)
        self.action = action


class ValidationError(PortalError):
    status_code = 400
    code = "validation_error"
    default_message = "Dados inválidos"

    def __init__(self, message: str | None = None, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(PortalError):
    status_code = 404
    code = "not_found"
    default_message = "Registro não encontrado"


class ConflictError(PortalError):
    status_code = 409
    code = "conflict"
    default_message = "Registro já existe"


class DependencyError(PortalError):
    """Falha de um serviço externo (banco de dados ou identidade).

    A mensagem exposta ao cliente é sempre genérica; ``detail`` guarda a causa
    para o log do servidor.
    """

    status_code = 500
    code = "dependency_error"
    default_message = "Erro interno do servidor"

    def __init__(self, detail: str | None = None):
        super().__init__(None)
        self.detail = detail
