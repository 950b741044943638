"""
Prompt templates for the AI proxy.

Each generation type has a fixed system prompt and a user-turn builder that
interpolates the request context. Missing context keys fall back to the
defaults below. Context keys use the camelCase names the client sends.
"""

from typing import Any, Callable, Dict, List

from src.core.exceptions import ValidationError
from src.models import GenerationType

Context = Dict[str, Any]

SYSTEM_PROMPTS: Dict[GenerationType, str] = {
    GenerationType.PROFILE: """Você é um especialista em posicionamento profissional para criativos e designers.
Gere um perfil de posicionamento profissional conciso e impactante em português brasileiro.
O perfil deve ter entre 2-3 parágrafos, destacando:
- A proposta de valor única do profissional
- A experiência e especialização
- O diferencial competitivo
Use linguagem profissional mas acessível.""",

    GenerationType.PORTFOLIO_STRUCTURE: """Você é um consultor de portfólios para profissionais criativos.
Com base nas informações fornecidas, sugira uma estrutura ideal para o portfólio em português brasileiro.
Inclua:
- Ordem recomendada de seções
- Tipos de projetos para destacar
- Dicas de apresentação
Seja específico e prático.""",

    GenerationType.PROJECT_NARRATIVE: """Você é um copywriter especializado em case studies de design e projetos criativos.
Crie uma narrativa envolvente para o projeto em português brasileiro.
A narrativa deve:
- Conectar as etapas do projeto de forma fluida
- Destacar desafios e soluções
- Evidenciar resultados e impacto
- Ter entre 2-4 parágrafos
Use linguagem profissional e persuasiva.""",

    GenerationType.PROPOSAL_INTRO: """Você é um especialista em propostas comerciais para serviços criativos.
Escreva uma introdução profissional e personalizada para uma proposta comercial em português brasileiro.
A introdução deve:
- Reconhecer as necessidades do cliente
- Apresentar brevemente o profissional/empresa
- Criar conexão e confiança
- Ter entre 1-2 parágrafos
Seja cordial mas profissional.""",

    GenerationType.PROPOSAL_JUSTIFICATION: """Você é um especialista em propostas comerciais para serviços criativos.
Escreva uma justificativa clara e convincente para os valores apresentados na proposta em português brasileiro.
A justificativa deve:
- Explicar o valor agregado dos serviços
- Destacar a experiência e qualidade
- Justificar o investimento
- Ter entre 1-2 parágrafos
Seja persuasivo mas honesto.""",

    GenerationType.PROPOSAL_CLOSING: """Você é um especialista em propostas comerciais para serviços criativos.
Escreva um fechamento profissional e motivador para uma proposta comercial em português brasileiro.
O fechamento deve:
- Resumir os benefícios principais
- Criar senso de oportunidade
- Incluir call-to-action claro
- Ter entre 1-2 parágrafos
Seja entusiasmado mas profissional.""",
}


def _value(context: Context, key: str, default: Any) -> Any:
    """Context value, or the default when missing or falsy."""
    value = context.get(key)
    return value if value else default


def _profile(ctx: Context) -> str:
    return "\n".join([
        "Gere um perfil de posicionamento profissional para:",
        f"Nome: {_value(ctx, 'name', 'Profissional')}",
        f"Área: {_value(ctx, 'area', 'Design')}",
        f"Nicho: {_value(ctx, 'niche', 'Generalista')}",
        f"Nível de experiência: {_value(ctx, 'experienceLevel', 'Intermediário')}",
        f"Cliente ideal: {_value(ctx, 'idealClient', 'Empresas e startups')}",
        f"Objetivo do portfólio: {_value(ctx, 'portfolioObjective', 'Atrair novos clientes')}",
    ])


def _portfolio_structure(ctx: Context) -> str:
    return "\n".join([
        "Sugira uma estrutura de portfólio para:",
        f"Nome: {_value(ctx, 'name', 'Profissional')}",
        f"Área: {_value(ctx, 'area', 'Design')}",
        f"Nicho: {_value(ctx, 'niche', 'Generalista')}",
        f"Número de projetos: {_value(ctx, 'projectCount', 0)}",
        f"Objetivo: {_value(ctx, 'portfolioObjective', 'Atrair novos clientes')}",
    ])


def _project_narrative(ctx: Context) -> str:
    technologies = ctx.get("technologies")
    if isinstance(technologies, list):
        technologies = ", ".join(str(tech) for tech in technologies)
    else:
        technologies = "Não informado"

    return "\n".join([
        "Crie uma narrativa para o projeto:",
        f"Título: {_value(ctx, 'title', 'Projeto')}",
        f"Briefing: {_value(ctx, 'briefing', 'Não informado')}",
        f"Desafio: {_value(ctx, 'challenge', 'Não informado')}",
        f"Execução: {_value(ctx, 'execution', 'Não informado')}",
        f"Resultado: {_value(ctx, 'result', 'Não informado')}",
        f"Tecnologias: {technologies}",
    ])


def _proposal_intro(ctx: Context) -> str:
    return "\n".join([
        "Escreva uma introdução para proposta:",
        f"Nome do cliente: {_value(ctx, 'clientName', 'Cliente')}",
        f"Nome do profissional: {_value(ctx, 'professionalName', 'Profissional')}",
        f"Área de atuação: {_value(ctx, 'area', 'Design')}",
        f"Projetos incluídos: {_value(ctx, 'projectCount', 1)} projeto(s)",
    ])


def _proposal_justification(ctx: Context) -> str:
    return "\n".join([
        "Escreva uma justificativa para proposta:",
        f"Valor total: R$ {_value(ctx, 'totalValue', '0,00')}",
        f"Tipo de orçamento: {_value(ctx, 'budgetType', 'fixo')}",
        f"Serviços incluídos: {_value(ctx, 'services', 'Design e desenvolvimento')}",
        f"Prazo estimado: {_value(ctx, 'deadline', 'A combinar')}",
    ])


def _proposal_closing(ctx: Context) -> str:
    return "\n".join([
        "Escreva um fechamento para proposta:",
        f"Nome do cliente: {_value(ctx, 'clientName', 'Cliente')}",
        f"Nome do profissional: {_value(ctx, 'professionalName', 'Profissional')}",
        f"Próximos passos sugeridos: {_value(ctx, 'nextSteps', 'Reunião de alinhamento')}",
    ])


USER_PROMPT_BUILDERS: Dict[GenerationType, Callable[[Context], str]] = {
    GenerationType.PROFILE: _profile,
    GenerationType.PORTFOLIO_STRUCTURE: _portfolio_structure,
    GenerationType.PROJECT_NARRATIVE: _project_narrative,
    GenerationType.PROPOSAL_INTRO: _proposal_intro,
    GenerationType.PROPOSAL_JUSTIFICATION: _proposal_justification,
    GenerationType.PROPOSAL_CLOSING: _proposal_closing,
}


def resolve_type(generation_type: str) -> GenerationType:
    try:
        return GenerationType(generation_type)
    except ValueError:
        raise ValidationError(f"Unknown generation type: {generation_type}")


def build_messages(generation_type: str, context: Context) -> List[Dict[str, str]]:
    """
    Chat messages for one generation request.

    Raises:
        ValidationError: If the type has no prompt template
    """
    kind = resolve_type(generation_type)
    return [
        {"role": "system", "content": SYSTEM_PROMPTS[kind]},
        {"role": "user", "content": USER_PROMPT_BUILDERS[kind](context or {})},
    ]
