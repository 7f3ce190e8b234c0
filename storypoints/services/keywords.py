from storypoints.schemas.keyword_taxonomy import ComplexityKeywords, KeywordTaxonomy, ScopeKeywords

# Default vocabulary is Portuguese; user overrides are stored as keywords-config.json
DEFAULT_TAXONOMY = KeywordTaxonomy(
    complexity=ComplexityKeywords(
        high=(
            "complexo", "complexa", "difícil", "desafiador", "desafiadora",
            "integração", "integrações", "múltiplos", "múltiplas", "vários",
            "várias", "algoritmo", "algoritmos", "otimização", "performance",
            "segurança", "arquitetura", "refatoração", "completa", "completo",
            "redesenho",
        ),
        medium=(
            "moderado", "moderada", "médio", "média", "implementar",
            "implementação", "criar", "desenvolver", "atualizar", "melhorar",
            "modificar", "adicionar", "funcionalidade", "feature", "componente",
            "módulo", "api",
        ),
        low=(
            "simples", "fácil", "básico", "básica", "pequeno", "pequena",
            "mínimo", "mínima", "corrigir", "ajustar", "atualizar", "texto",
            "label", "estilo", "css", "documentação", "comentário",
            "comentários", "typo", "erro de digitação",
        ),
    ),
    scope=ScopeKeywords(
        large=(
            "sistema", "plataforma", "aplicação", "aplicativo", "completo",
            "completa", "todos", "todas", "inteiro", "inteira", "global",
            "abrangente",
        ),
        medium=(
            "módulo", "componente", "página", "tela", "feature",
            "funcionalidade", "serviço", "api", "endpoint", "fluxo", "processo",
        ),
        small=(
            "botão", "campo", "texto", "label", "ícone", "imagem", "estilo",
            "validação", "mensagem", "notificação", "alerta", "tooltip",
        ),
    ),
    dependency=(
        "depende", "dependência", "dependências", "requer", "necessita",
        "após", "depois", "antes", "integrar", "integração", "conectar",
        "terceiros", "externo", "externa", "api", "serviço", "banco de dados",
    ),
)
