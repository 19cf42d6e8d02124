"""Tipos literais compartilhados pelos esquemas de requisição/resposta."""

from typing import Literal

RoleLiteral = Literal["Analista", "Coordenador", "Gerente"]
DocumentStatusLiteral = Literal["Rascunho", "Aguardando Aprovação", "Aprovado", "Arquivado"]
ChangeTypeLiteral = Literal["created", "updated", "approved", "archived", "restored"]
