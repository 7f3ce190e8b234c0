from storypoints.agent.graph import create_services

#Example runs on the estimation pipeline

if __name__ == "__main__":
    services = create_services()

    res = services.agent.invoke({
        "title": "Implementar login de usuário",
        "description": "Criar tela de login com validação de email e senha, integração com backend de autenticação",
        "task_type": "feature",
        "taxonomy": services.store.load_taxonomy(),
        "errors": [],
    })

    # res = services.agent.invoke({
    #     "title": "Corrigir typo no rodapé",
    #     "description": "Ajustar texto simples do rodapé",
    #     "task_type": "bug",
    #     "ai_model": "groq",
    #     "errors": [],
    # })

    print(res.get("report_markdown", "No report generated."))
