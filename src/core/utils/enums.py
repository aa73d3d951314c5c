import enum


class UserRole(str, enum.Enum):
    """
    Perfis disponíveis no sistema.
    IMPORTANTE: Mantenha sincronizado com o frontend.
    """
    ADMIN = "admin"              # Administrador (gerencia usuários e lojas)
    USER = "user"                # Usuário comum (navega e avalia lojas)
    STORE_OWNER = "store_owner"  # Proprietário (vê avaliações da própria loja)


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"

    @property
    def direction(self) -> int:
        return 1 if self is SortOrder.ASC else -1
